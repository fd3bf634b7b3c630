class DeBrowserError(Exception):
    """Base exception for all de_browser errors"""
    pass


class ConfigError(DeBrowserError):
    """Invalid or inconsistent global.json / dataset config"""
    pass


class DatasetLoadError(DeBrowserError):
    """Source table missing, unreadable or in an unsupported format"""
    pass


class NoFeaturesFound(DeBrowserError):
    """
    Normalization kept zero rows (every row failed the baseMean gate).
    Recoverable: the previously loaded dataset stays active.
    """

    def __init__(self, resource_name: str):
        self.resource_name = resource_name
        super().__init__(f"Failed to find any features in {resource_name}")
