"""
Folio — data layer and analysis engines for the basket index

Modules:
- data: DailyBar schema, TimeSeriesStore, FMP provider, CSV price cache
- analysis: display windows, statistics, correlation ranking
"""
