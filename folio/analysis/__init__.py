from .window import Window
from .statistics import StatisticsEngine
from .correlation import CorrelationEngine, CorrelationResult, candidate_universe
