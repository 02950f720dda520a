# -*- coding: utf-8 -*-
"""
Fortnight Agent API 服务

基于 FastAPI 的 MultiversX Agent 服务接口。

启动方式：
    # 开发模式
    uvicorn fortnight_api.main:app --reload --host 0.0.0.0 --port 8000

    # 或使用命令行
    fortnight serve --port 8000

API 文档：
    - Swagger UI: http://localhost:8000/docs
    - ReDoc: http://localhost:8000/redoc

环境变量：
    - API_HOST / API_PORT / API_DEBUG / API_WORKERS: 服务配置
    - LLM_BASE_URL / OPENAI_API_KEY / LLM_MODEL / LLM_TIMEOUT: Chat Completion 配置
    - MULTIVERSX_ENV: devnet / testnet / mainnet (默认: devnet)
    - MULTIVERSX_API / MULTIVERSX_GATEWAY / MULTIVERSX_EXPLORER: 覆盖网络地址
    - TOKEN_SWAP_CONTRACT / LIQUIDITY_POOL_CONTRACT: 合约地址
    - AGENT_DEFINITIONS_DIR: 启动时加载的 Agent 定义目录
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fortnight import __version__

from fortnight_api.config import settings
from fortnight_api.routes import router
from fortnight_api.service import agent_service

# 配置日志
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


# ============================================================================
# 生命周期管理
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    logger.info("=" * 60)
    logger.info("Fortnight Agent API 服务正在启动...")
    logger.info("=" * 60)

    try:
        agent_service.initialize()
        logger.info(f"服务地址: http://{settings.server.host}:{settings.server.port}")
        logger.info(f"网络环境: {settings.network.environment} ({settings.network.gateway_url})")
        logger.info(f"API 文档: http://{settings.server.host}:{settings.server.port}/docs")
        logger.info("=" * 60)
    except Exception as e:
        logger.error(f"服务初始化失败: {e}", exc_info=True)
        raise

    yield

    logger.info("=" * 60)
    logger.info("Fortnight Agent API 服务正在关闭...")
    agent_service.shutdown()
    logger.info("服务已关闭")
    logger.info("=" * 60)


# ============================================================================
# 创建应用
# ============================================================================


app = FastAPI(
    title="Fortnight Agent API",
    description="""
## MultiversX DeFi Agent 服务 API

- 🤖 **Agent 管理**：创建 / 列出 / 移除交易与情绪分析 Agent
- 💬 **对话**：每个 Agent 维护自己的对话记忆
- ⚙️ **动作**：swap、流动性、市场分析、情绪分析等
- 🧾 **交易会话**：Agent 构建的未签名交易，由钱包拉取签名
- ⛓️ **链上查询**：网络配置、账户、Token
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ============================================================================
# 中间件
# ============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # 生产环境应配置具体域名
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# 注册路由
# ============================================================================

app.include_router(router, prefix="/api/v1")


@app.get("/", include_in_schema=False)
async def root():
    """根路径"""
    return {
        "service": "Fortnight Agent API",
        "version": __version__,
        "docs": "/docs",
        "health": "/api/v1/health",
    }


# ============================================================================
# 主入口
# ============================================================================


def run(host: Optional[str] = None, port: Optional[int] = None):
    """启动 uvicorn"""
    import uvicorn

    uvicorn.run(
        "fortnight_api.main:app",
        host=host or settings.server.host,
        port=port or settings.server.port,
        reload=settings.server.debug,
        workers=settings.server.workers if not settings.server.debug else 1,
    )


def main():
    """主入口函数"""
    run()


if __name__ == "__main__":
    main()
