"""
CantoInput FastAPI 服务

无状态接口：会话状态由客户端保存，每次按键随请求带回
"""

import dataclasses
import os
import time
import uuid
from typing import Dict, List, Optional, Tuple
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from cantoinput.engine import (
    Charset,
    EngineConfig,
    InputEngine,
    InputMethod,
    Mode,
    Modifier,
    SessionState,
    create_engine,
    get_api_logger,
    handle_keystroke,
    initial_state,
)
from cantoinput.engine.session import with_buffer

logger = get_api_logger()


# ===== 请求/响应模型 =====

class PageModel(BaseModel):
    """当前页"""
    visible: List[str]
    page_label: str
    total_pages: int
    page_index: int


class ResolveRequest(BaseModel):
    """候选查询请求"""
    buffer: str = Field(..., min_length=1, max_length=64, description="拼音输入")
    method: InputMethod = Field(InputMethod.YALE, description="输入方案")
    charset: Charset = Field(Charset.TRADITIONAL, description="输出字形")
    page_index: int = Field(0, ge=0, description="页码（从 0 开始）")


class ResolveResponse(BaseModel):
    """候选查询响应"""
    buffer: str
    matched: bool
    candidates: Optional[List[str]] = None
    page: PageModel


class SessionStateModel(BaseModel):
    """客户端保存的会话状态"""
    mode: Mode = Mode.COMPOSITION
    input_buffer: str = Field("", pattern=r"^[a-z]*$", max_length=64)
    page_index: int = Field(0, ge=0)


class KeystrokeRequest(BaseModel):
    """按键请求"""
    state: SessionStateModel = Field(default_factory=SessionStateModel)
    key: str = Field(..., min_length=1, description="单个字符或特殊键名（backspace / enter / escape / page_up ...）")
    modifiers: List[Modifier] = Field(default_factory=list)
    method: InputMethod = InputMethod.YALE
    charset: Charset = Charset.TRADITIONAL


class KeystrokeResponse(BaseModel):
    """按键响应"""
    consumed: bool
    commit_text: Optional[str] = None
    state: SessionStateModel
    page: PageModel


class HealthResponse(BaseModel):
    """健康检查响应"""
    status: str
    version: str


# ===== 引擎池（每个方案/字形一个只读快照） =====
engines: Dict[Tuple[InputMethod, Charset], InputEngine] = {}


def get_engine(method: InputMethod, charset: Charset) -> InputEngine:
    key = (method, charset)
    if key not in engines:
        if not engines:
            raise HTTPException(status_code=503, detail="引擎未就绪")
        engines[key] = create_engine(EngineConfig(method=method, charset=charset))
        logger.info(f"加载方案: {method.value}/{charset.value}")
    return engines[key]


def _page_model(state: SessionState) -> PageModel:
    view = state.view()
    return PageModel(
        visible=view.visible,
        page_label=view.page_label,
        total_pages=view.total_pages,
        page_index=view.page_index,
    )


def _restore_state(model: SessionStateModel, engine: InputEngine) -> SessionState:
    """由客户端状态重建会话（候选在服务端重新解析）"""
    state = initial_state(model.mode, engine.config.page_size)
    if not model.input_buffer:
        return state
    state = with_buffer(state, model.input_buffer, engine.context)
    pages = state.paging.total_pages
    page_index = min(model.page_index, max(pages - 1, 0))
    return dataclasses.replace(state, paging=dataclasses.replace(state.paging, page_index=page_index))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    logger.info("=" * 50)
    logger.info("CantoInput API 服务启动")

    config = EngineConfig()
    engines[(config.method, config.charset)] = create_engine(config)

    logger.info("引擎初始化完成")
    logger.info("=" * 50)

    yield

    engines.clear()
    logger.info("CantoInput API 服务已停止")


# ===== FastAPI 应用 =====
app = FastAPI(
    title="CantoInput API",
    description="粤语 / 普通话拼音输入法引擎 API",
    version="1.10.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """记录所有请求"""
    request_id = str(uuid.uuid4())[:8]
    start_time = time.perf_counter()

    logger.info(f"[{request_id}] --> {request.method} {request.url.path}")

    try:
        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        status_code = response.status_code
        log_level = "info" if status_code < 400 else "warning" if status_code < 500 else "error"
        getattr(logger, log_level)(f"[{request_id}] <-- {status_code} | {elapsed_ms:.2f}ms")

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{elapsed_ms:.2f}ms"
        return response

    except Exception as e:
        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.error(f"[{request_id}] <-- ERROR | {elapsed_ms:.2f}ms | {type(e).__name__}: {e}")
        raise


# ===== API 路由 =====

@app.get("/health", response_model=HealthResponse)
async def health_check():
    """健康检查"""
    from cantoinput import __version__
    return HealthResponse(
        status="healthy" if engines else "not_ready",
        version=__version__,
    )


@app.post("/resolve", response_model=ResolveResponse)
async def resolve_buffer(request: ResolveRequest):
    """解析拼音，返回去重后的候选与当前页"""
    engine = get_engine(request.method, request.charset)

    candidates = engine.resolve(request.buffer)
    view = engine.paginate(candidates, request.page_index)
    logger.debug(f"解析: '{request.buffer}' -> {view.visible[:3]}")

    return ResolveResponse(
        buffer=request.buffer,
        matched=candidates is not None,
        candidates=candidates,
        page=PageModel(
            visible=view.visible,
            page_label=view.page_label,
            total_pages=view.total_pages,
            page_index=view.page_index,
        ),
    )


@app.post("/keystroke", response_model=KeystrokeResponse)
async def keystroke(request: KeystrokeRequest):
    """处理一次按键；客户端需保存返回的 state 并在下次请求中带回"""
    engine = get_engine(request.method, request.charset)
    state = _restore_state(request.state, engine)

    try:
        result = handle_keystroke(state, request.key, request.modifiers, engine.context)
    except ValueError as e:
        logger.warning(f"无效按键: {request.key!r} ({e})")
        raise HTTPException(status_code=400, detail=str(e))

    new_state = result.state
    return KeystrokeResponse(
        consumed=result.consumed,
        commit_text=result.commit_text,
        state=SessionStateModel(
            mode=new_state.mode,
            input_buffer=new_state.input_buffer,
            page_index=new_state.page_index,
        ),
        page=_page_model(new_state),
    )


@app.get("/stats")
async def get_stats():
    """获取各引擎统计"""
    if not engines:
        raise HTTPException(status_code=503, detail="引擎未就绪")
    return {f"{m.value}/{c.value}": e.get_stats() for (m, c), e in engines.items()}


# ===== 启动入口 =====

def main():
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "3000"))
    log_level = os.getenv("LOG_LEVEL", "info").lower()

    logger.info(f"启动 CantoInput API 服务: http://{host}:{port}")
    logger.info(f"API 文档: http://{host}:{port}/docs")

    uvicorn.run(
        "cantoinput.api.server:app",
        host=host,
        port=port,
        reload=False,
        workers=1,
        log_level=log_level,
    )


if __name__ == "__main__":
    main()
