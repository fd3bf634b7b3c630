from .scatter_chart import ScatterChartRenderer

__all__ = ["ScatterChartRenderer"]
