"""
Portfolio Desk — 篮子管理、合成指数、基准对比

Modules:
- basket: 加权篮子 (CRUD, CSV 导入, JSON 持久化)
- index: 合成 NAV 指数 (calendar union + forward-fill)
- benchmark: 对比序列归一 + 相对表现
- report: 串联各引擎 + markdown 报告
"""
