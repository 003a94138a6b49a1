"""
全局测试守卫: 防止测试覆盖或删除真实数据文件。

价格缓存 (data/price/*.csv) 和 basket.json 都是用户数据。
测试应在 tmp_path 中操作; 此 fixture 在会话开始时记录文件清单和修改时间，
结束后对比，如果文件被删除或改写则报告警告 (不 fail)。
"""
import logging
import warnings
from pathlib import Path

import pytest

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"

# 需要保护的子目录
PROTECTED_DIRS = ["price"]
PROTECTED_FILES = ["basket.json"]


def _snapshot_file_list() -> dict:
    """记录受保护文件 → mtime。"""
    files = {}
    for subdir in PROTECTED_DIRS:
        dir_path = DATA_DIR / subdir
        if dir_path.exists():
            for f in dir_path.iterdir():
                if f.is_file():
                    files[str(f.relative_to(DATA_DIR))] = f.stat().st_mtime
    for name in PROTECTED_FILES:
        path = DATA_DIR / name
        if path.exists():
            files[name] = path.stat().st_mtime
    return files


@pytest.fixture(autouse=True, scope="session")
def guard_real_data():
    before = _snapshot_file_list()
    yield
    after = _snapshot_file_list()
    deleted = set(before) - set(after)
    modified = {k for k in set(before) & set(after) if before[k] != after[k]}
    if deleted or modified:
        msg = f"测试期间 data/ 中有文件被改动: deleted={sorted(deleted)} modified={sorted(modified)}"
        logger.error(msg)
        warnings.warn(msg, UserWarning)
