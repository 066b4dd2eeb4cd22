"""Run telemetry: recorded order-parameter time series."""

from .timeseries import TimeSeries, TimeSeriesRecorder, read_time_series

__all__ = ["TimeSeries", "TimeSeriesRecorder", "read_time_series"]
