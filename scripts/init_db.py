#!/usr/bin/env python3
"""
数据库初始化脚本
为 SQL 存储后端创建所有数据库表（DATABASE_URL 指定的数据库）
"""
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add src/backend to path
backend_dir = Path(__file__).parent / ".." / "src" / "backend"
sys.path.insert(0, str(backend_dir))

load_dotenv()

from brainbolt.core.config import get_quiz_config
from brainbolt.core.database import create_db_engine
from brainbolt.models import init_db

if __name__ == "__main__":
    config = get_quiz_config()
    print(f"初始化数据库: {config.database_url}")
    init_db(create_db_engine(config.database_url))
    print("完成！")
