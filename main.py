from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel
from typing import List, Dict, Any, Optional
import asyncio
import logging
import os

from config import ServerSettings
from display import GridDisplay, RecordingDisplay
from errors import ParseError, ScriptError
from interpreter import EngineState, Interpreter
from parser import parse

logger = logging.getLogger(__name__)

settings = ServerSettings.from_env()

app = FastAPI(title="GridScript IDE", version="1.0.0")

EXAMPLES = {
    "hello": {
        "name": "Olá (print)",
        "code": "1 begin\n2 int x\n3 set x 5\n4 print x x hi\n5 end",
    },
    "countdown": {
        "name": "Contagem com goto e if",
        "code": (
            "10 begin\n20 int row\n30 int col\n40 set row 0\n50 set col 2\n"
            "60 print row col tick\n70 add row 1\n80 if row lt 5\n90 goto 60\n100 end"
        ),
    },
    "diagonal": {
        "name": "Diagonal",
        "code": (
            "1 begin\n2 int i\n3 set i 0\n4 print i i *\n5 add i 1\n"
            "6 if i gte 10\n7 goto 9\n8 goto 4\n9 end"
        ),
    },
}


# --- Modelos de Dados ---
class CodeRequest(BaseModel):
    code: str


class RenderCall(BaseModel):
    row: int
    col: int
    text: str


class RunResponse(BaseModel):
    success: bool
    state: str
    renders: List[RenderCall] = []
    screen: List[str] = []
    variables: Dict[str, int] = {}
    error: Optional[Dict[str, Any]] = None


# --- Lógica Auxiliar ---

def run_program(code: str) -> RunResponse:
    """Analisa e executa um programa, guardando as chamadas de render."""
    try:
        program = parse(code)
    except ParseError as e:
        return RunResponse(success=False, state="invalid", error=e.to_dict())

    limits = settings.limits()
    recorder = RecordingDisplay()
    interpreter = Interpreter(program, recorder, limits)
    error = None
    try:
        interpreter.run()
    except ScriptError as e:
        error = e.to_dict()

    grid = GridDisplay(limits.screen_rows, limits.screen_cols)
    for call in recorder.calls:
        grid.render(call.row, call.col, call.text)

    return RunResponse(
        success=error is None,
        state=interpreter.state.value,
        renders=[RenderCall(row=c.row, col=c.col, text=c.text) for c in recorder.calls],
        screen=grid.lines(),
        variables=interpreter.variables.values(),
        error=error,
    )


async def handle_execution(websocket: WebSocket, code: str):
    """Executa o programa e transmite cada render como uma mensagem."""
    try:
        program = parse(code)
    except ParseError as e:
        await websocket.send_json({"type": "execution_finished", "success": False, "error": e.to_dict()})
        return

    await websocket.send_json({"type": "program", **program.to_dict()})
    await websocket.send_json({"type": "execution_started"})

    recorder = RecordingDisplay()
    interpreter = Interpreter(program, recorder, settings.limits())
    sent = 0
    try:
        while interpreter.step() == EngineState.RUNNING:
            while sent < len(recorder.calls):
                call = recorder.calls[sent]
                await websocket.send_json({"type": "render", "row": call.row, "col": call.col, "text": call.text})
                sent += 1
                await asyncio.sleep(0.01)
    except ScriptError as e:
        await _flush(websocket, recorder, sent)
        await websocket.send_json({"type": "execution_finished", "success": False, "error": e.to_dict()})
        return

    await _flush(websocket, recorder, sent)
    await websocket.send_json({
        "type": "execution_finished",
        "success": True,
        "variables": interpreter.variables.values(),
    })


async def _flush(websocket: WebSocket, recorder: RecordingDisplay, sent: int):
    for call in recorder.calls[sent:]:
        await websocket.send_json({"type": "render", "row": call.row, "col": call.col, "text": call.text})


# --- Endpoints da API ---
@app.websocket("/api/execute-interactive")
async def execute_interactive(websocket: WebSocket):
    await websocket.accept()
    try:
        code = (await websocket.receive_json()).get("code", "")
        await handle_execution(websocket, code)
    except WebSocketDisconnect:
        logger.debug("client disconnected during execution")


@app.post("/api/compile")
async def compile_code(request: CodeRequest):
    try:
        program = parse(request.code)
    except ParseError as e:
        return {"success": False, "errors": [e.to_dict()]}
    return {"success": True, "program": program.to_dict()}


@app.post("/api/run", response_model=RunResponse)
async def run_code(request: CodeRequest):
    return run_program(request.code)


@app.get("/api/examples")
async def get_examples():
    return EXAMPLES


# --- Configuração do App ---
if os.path.isdir(settings.static_dir):
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
