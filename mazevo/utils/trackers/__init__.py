from mazevo.utils.trackers.base import LogWriter
from mazevo.utils.trackers.configs import TBConfig
from mazevo.utils.trackers.statistics import StatisticsFileWriter, format_statistics

__all__ = ["LogWriter", "StatisticsFileWriter", "TBConfig", "format_statistics"]
