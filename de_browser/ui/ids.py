from __future__ import annotations

__all__ = ["IDs"]


class IDs:
    class Store:
        DATASET_VERSION = "dataset-version"
        CHART_REVISION = "chart-revision"

    class Control:
        # Dataset selection
        DATASET_SELECT = "dataset-select"
        UPLOAD = "dataset-upload"
        STATUS_BAR = "status-bar"

        # Threshold sliders
        LOG_P_CUT = "log-p-cut-slider"
        FC_CUT = "fc-cut-slider"
        ALPHA = "alpha-slider"
        PLOT_MODE = "plot-mode-radio"
        UP_DOWN = "up-down-counts"

        # Gene search
        GENE_INPUT = "gene-input"
        GENE_ADD_BTN = "gene-add-btn"
        GENE_LIST = "gene-list"
        GENE_COPY = "gene-copy"

        # Chart
        CHART_CARD = "chart-card"
        MAIN_GRAPH = "main-graph"
        RENDER_TICK = "render-tick"

        # Grid
        RESULTS_GRID = "results-grid"
