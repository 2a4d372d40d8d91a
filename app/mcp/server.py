"""
MCP tool server for IDE/agent clients.
Exposes the chat-turn capture operation over streamable HTTP at `/mcp`.
"""
import logging
from typing import Annotated, Any, Dict, Optional

import anyio
from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from mcp.server.transport_security import TransportSecuritySettings
from pydantic import Field, ValidationError

from app.core.config import settings
from app.core.database import SessionLocal
from app.schemas.capture_schema import ChatTurnCapture
from app.schemas.question_schema import AnswerResponse, QuestionResponse
from app.services.capture_service import CaptureError, capture_chat_turn

logger = logging.getLogger(__name__)

MCP_PATH = "/mcp"

# "chat-turn/capture" is the name earlier IDE configurations were set up with.
CAPTURE_TOOL_NAMES = ("capture_chat_turn", "chat-turn/capture")
CAPTURE_TOOL_DESCRIPTION = (
    "Capture a user question and the assistant's answer in one call. "
    "The IDE should provide the GitHub repository URL from the current workspace "
    "if available (e.g., from git remote origin)."
)


def _capture_sync(request: ChatTurnCapture) -> Dict[str, Any]:
    db = SessionLocal()
    try:
        turn = capture_chat_turn(db, request)
        return {
            "message": turn.message,
            "question": QuestionResponse.model_validate(turn.question).model_dump(mode="json"),
            "answer": AnswerResponse.model_validate(turn.answer).model_dump(mode="json"),
        }
    finally:
        db.close()


async def capture_chat_turn_tool(
    user_message: Annotated[str, Field(min_length=1, description="The user's question")],
    assistant_message: Annotated[str, Field(min_length=1, description="The assistant's answer")],
    is_correct: Annotated[bool, Field(description="Whether the answer was marked as correct")] = False,
    language: Annotated[Optional[str], Field(description="Programming language of the project in use")] = None,
    topic_language: Annotated[Optional[str], Field(description="Programming language the question is about")] = None,
    framework: Annotated[Optional[str], Field(description="Framework in use")] = None,
    runtime: Annotated[Optional[str], Field(description="Runtime environment")] = None,
    source_ide: Annotated[Optional[str], Field(description="The IDE being used (e.g., 'Cursor', 'VSCode')")] = None,
    github_repo: Annotated[Optional[str], Field(description="GitHub repository URL of the current workspace")] = None,
) -> Dict[str, Any]:
    try:
        request = ChatTurnCapture(
            user_message=user_message,
            assistant_message=assistant_message,
            is_correct=is_correct,
            language=language,
            topic_language=topic_language,
            framework=framework,
            runtime=runtime,
            source_ide=source_ide,
            github_repo=github_repo,
        )
    except ValidationError as e:
        raise ToolError(f"Failed to capture chat turn: {e}")

    # Session work is blocking; keep it off the event loop.
    try:
        return await anyio.to_thread.run_sync(_capture_sync, request)
    except CaptureError as e:
        raise ToolError(f"Failed to capture chat turn: {e}")
    except Exception as e:
        logger.exception("Unexpected error in capture_chat_turn tool")
        raise ToolError(f"Failed to capture chat turn: {e}")


def _transport_security() -> TransportSecuritySettings:
    # An empty host list switches Host/Origin validation off so remote IDEs can connect.
    hosts = list(settings.MCP_ALLOWED_HOSTS)
    return TransportSecuritySettings(
        enable_dns_rebinding_protection=bool(hosts),
        allowed_hosts=hosts,
        allowed_origins=list(settings.MCP_ALLOWED_ORIGINS),
    )


def build_mcp_server() -> FastMCP:
    """A fresh server per app: its session manager can only be run once."""
    server = FastMCP(
        settings.MCP_SERVER_NAME,
        stateless_http=True,
        json_response=True,
        streamable_http_path=MCP_PATH,
        transport_security=_transport_security(),
    )
    for name in CAPTURE_TOOL_NAMES:
        server.add_tool(capture_chat_turn_tool, name=name, description=CAPTURE_TOOL_DESCRIPTION)
    return server
