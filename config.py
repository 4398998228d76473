"""
Configuration module for the Workflow DAG demo.
Loads settings from environment variables or .env file.
Workflow DAG 配置模块。
从环境变量或 .env 文件加载所有配置项。
"""

import os
from dotenv import load_dotenv

load_dotenv()  # 自动读取项目根目录的 .env 文件（若存在），优先级低于系统环境变量

# --- Random generation defaults ---
# --- 随机 DAG 生成默认参数 ---
DEFAULT_NODE_COUNT = int(os.getenv("DEFAULT_NODE_COUNT", "6"))                   # 节点数量
DEFAULT_EDGE_PROBABILITY = float(os.getenv("DEFAULT_EDGE_PROBABILITY", "0.3"))   # 每条允许边的生成概率
DEFAULT_SEED = int(os.getenv("DEFAULT_SEED", "0"))                               # 随机种子，0 表示按当前时间生成

# --- Diagram export ---
# --- 图导出 ---
OUTPUT_DIR = os.getenv("OUTPUT_DIR", "example_output")   # .dot / 图片输出目录
DOT_BINARY = os.getenv("DOT_BINARY", "dot")               # Graphviz 渲染程序路径
RENDER_FORMAT = os.getenv("RENDER_FORMAT", "png")         # 渲染输出格式（dot -T 参数）
RENDER_TIMEOUT = int(os.getenv("RENDER_TIMEOUT", "30"))   # 渲染子进程超时时间（秒）
