"""
Rome77 editor backend. Serves diagnostics, syntax trees and IR for editor integrations.
Run: python -m rome77.api  (or uvicorn rome77.api:app --reload)
"""

import os
from typing import Any, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from rome77 import __version__
from rome77.errors import Rome77Error
from rome77.keywords import get_keywords
from rome77.lexer import tokenize
from rome77.parser import parse
from rome77.pipeline import compile_source
from rome77.syntax_tree import SyntaxNode

app = FastAPI(title="Rome77 Editor API", version=__version__)
app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

EDITOR_PATH = "editor"


# --- Request/response models ---

class SourceRequest(BaseModel):
    source: str


class Diagnostic(BaseModel):
    kind: str
    line: int
    column: int
    message: str

    @classmethod
    def from_error(cls, e: Rome77Error) -> "Diagnostic":
        return cls(kind=e.kind.value, line=e.line, column=e.column, message=e.message)


class TokenInfo(BaseModel):
    kind: str
    text: str
    line: int
    column: int


class TokensResponse(BaseModel):
    ok: bool
    tokens: list[TokenInfo] = []
    diagnostic: Optional[Diagnostic] = None


class ParseResponse(BaseModel):
    ok: bool
    tree: Optional[dict[str, Any]] = None
    diagnostic: Optional[Diagnostic] = None


class CheckResponse(BaseModel):
    ok: bool
    diagnostic: Optional[Diagnostic] = None


class LowerResponse(BaseModel):
    ok: bool
    program: Optional[dict[str, Any]] = None
    diagnostic: Optional[Diagnostic] = None


class KeywordsResponse(BaseModel):
    keywords: dict[str, str]


def _tree_to_dict(node: SyntaxNode) -> dict[str, Any]:
    return {
        "name": node.name,
        "text": node.text,
        "line": node.line,
        "column": node.column,
        "children": [_tree_to_dict(c) for c in node.children],
    }


# --- API routes ---

@app.post("/api/tokens", response_model=TokensResponse)
def api_tokens(req: SourceRequest) -> TokensResponse:
    """Tokenize source. Returns the tokens or the lexical diagnostic."""
    try:
        tokens = tokenize(req.source, path=EDITOR_PATH)
    except Rome77Error as e:
        return TokensResponse(ok=False, diagnostic=Diagnostic.from_error(e))
    return TokensResponse(
        ok=True,
        tokens=[TokenInfo(kind=t.kind, text=t.text, line=t.line, column=t.column) for t in tokens],
    )


@app.post("/api/parse", response_model=ParseResponse)
def api_parse(req: SourceRequest) -> ParseResponse:
    """Parse source and return the syntax tree."""
    try:
        tree = parse(req.source, path=EDITOR_PATH)
    except Rome77Error as e:
        return ParseResponse(ok=False, diagnostic=Diagnostic.from_error(e))
    return ParseResponse(ok=True, tree=_tree_to_dict(tree.root))


@app.post("/api/check", response_model=CheckResponse)
def api_check(req: SourceRequest) -> CheckResponse:
    """Run the whole front end. Returns ok or the first diagnostic."""
    result = compile_source(req.source, path=EDITOR_PATH)
    if not result.ok:
        return CheckResponse(ok=False, diagnostic=Diagnostic.from_error(result.error))
    return CheckResponse(ok=True)


@app.post("/api/lower", response_model=LowerResponse)
def api_lower(req: SourceRequest) -> LowerResponse:
    """Run the whole front end and return the IR as JSON."""
    result = compile_source(req.source, path=EDITOR_PATH)
    if not result.ok:
        return LowerResponse(ok=False, diagnostic=Diagnostic.from_error(result.error))
    return LowerResponse(ok=True, program=result.program.to_dict())


@app.get("/api/keywords", response_model=KeywordsResponse)
def api_keywords() -> KeywordsResponse:
    """Return the keyword table (spelling -> token kind)."""
    return KeywordsResponse(keywords=dict(get_keywords()))


if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("ROME77_API_PORT", "8000"))
    uvicorn.run(app, host="0.0.0.0", port=port)
