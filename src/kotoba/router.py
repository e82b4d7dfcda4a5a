from typing import List, Optional

from fastapi import APIRouter, Cookie, Depends, File, Form, Response, UploadFile

from .config import settings
from .exchange import backup_filename, export_lists, parse_import
from .globals import session_registry, vocab_store
from .models import (
    AnswerOutcome,
    Entry,
    EvaluationResult,
    ListSummary,
    Prompt,
    VocabList,
)
from .registry import SessionRegistry
from .store import VocabularyStore


router = APIRouter(prefix="/api")


# --- Dependencies ---
def get_store() -> VocabularyStore:
    return vocab_store


def get_registry() -> SessionRegistry:
    return session_registry


def get_session_id(
    session_id: Optional[str] = Cookie(None, alias=settings.SESSION_COOKIE_NAME)
) -> Optional[str]:
    return session_id


def _set_session_cookie(response: Response, session_id: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_id,
        httponly=True,
        samesite="Lax",
    )


def _download(content: str, filename: str, media_type: str) -> Response:
    return Response(
        content=content.encode("utf-8"),
        media_type=f"{media_type}; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# --- Lists ---
@router.get("/lists", response_model=List[ListSummary])
async def list_summaries(store: VocabularyStore = Depends(get_store)):
    return store.summaries()


@router.post("/lists", response_model=VocabList, status_code=201)
async def create_list(
    title: str = Form(...),
    description: str = Form(""),
    store: VocabularyStore = Depends(get_store),
):
    return store.create_list(title, description)


@router.get("/lists/{list_id}", response_model=VocabList)
async def get_list(list_id: str, store: VocabularyStore = Depends(get_store)):
    return store.get_list(list_id)


@router.patch("/lists/{list_id}", response_model=VocabList)
async def update_list_metadata(
    list_id: str,
    title: str = Form(...),
    description: str = Form(""),
    store: VocabularyStore = Depends(get_store),
):
    return store.update_metadata(list_id, title, description)


@router.delete("/lists/{list_id}")
async def delete_list(
    list_id: str, confirm: bool = False, store: VocabularyStore = Depends(get_store)
):
    store.delete_list(list_id, confirm=lambda _: confirm)
    return {"status": "success"}


# --- Words ---
@router.get("/lists/{list_id}/words", response_model=List[Entry])
async def search_words(
    list_id: str, q: str = "", store: VocabularyStore = Depends(get_store)
):
    return store.search_entries(list_id, q)


@router.post("/lists/{list_id}/words", response_model=Entry, status_code=201)
async def add_word(
    list_id: str,
    term: str = Form(""),
    reading: str = Form(""),
    meaning: str = Form(""),
    store: VocabularyStore = Depends(get_store),
):
    return store.add_entry(list_id, term, reading, meaning)


@router.put("/lists/{list_id}/words/{word_id}", response_model=Entry)
async def edit_word(
    list_id: str,
    word_id: str,
    term: str = Form(""),
    reading: str = Form(""),
    meaning: str = Form(""),
    store: VocabularyStore = Depends(get_store),
):
    return store.update_entry(list_id, word_id, term, reading, meaning)


@router.delete("/lists/{list_id}/words/{word_id}")
async def delete_word(
    list_id: str,
    word_id: str,
    confirm: bool = False,
    store: VocabularyStore = Depends(get_store),
):
    store.delete_entry(list_id, word_id, confirm=lambda _: confirm)
    return {"status": "success"}


@router.post("/lists/{list_id}/words/import", response_model=List[Entry])
async def import_words_csv(
    list_id: str,
    file: UploadFile = File(...),
    store: VocabularyStore = Depends(get_store),
):
    content = await file.read()
    return store.import_entries_csv(list_id, content)


@router.get("/lists/{list_id}/words/export")
async def export_words_csv(list_id: str, store: VocabularyStore = Depends(get_store)):
    return _download(store.export_entries_csv(list_id), f"{list_id}.csv", "text/csv")


# --- Backup ---
@router.get("/export")
async def export_backup(store: VocabularyStore = Depends(get_store)):
    return _download(
        export_lists(store.all_lists()), backup_filename(), "application/json"
    )


@router.post("/import")
async def import_backup(
    file: UploadFile = File(...), store: VocabularyStore = Depends(get_store)
):
    lists = parse_import(await file.read())
    return {"status": "success", "imported": store.import_lists(lists)}


# --- Test session ---
@router.post("/lists/{list_id}/test", response_model=Prompt)
async def start_test(
    list_id: str,
    response: Response,
    word_ids: List[str] = Form([]),
    session_id: Optional[str] = Depends(get_session_id),
    store: VocabularyStore = Depends(get_store),
    registry: SessionRegistry = Depends(get_registry),
):
    entries = store.select_entries(list_id, word_ids)
    new_id, _ = registry.start(list_id, entries, replaces=session_id)
    _set_session_cookie(response, new_id)
    return registry.prompt(new_id)


@router.get("/test", response_model=Prompt)
async def current_prompt(
    session_id: Optional[str] = Depends(get_session_id),
    registry: SessionRegistry = Depends(get_registry),
):
    return registry.prompt(session_id)


@router.post("/test/answer", response_model=AnswerOutcome)
async def submit_answer(
    reading: str = Form(""),
    meaning: str = Form(""),
    session_id: Optional[str] = Depends(get_session_id),
    registry: SessionRegistry = Depends(get_registry),
):
    return registry.submit(session_id, reading, meaning)


@router.post("/test/cancel")
async def cancel_test(
    response: Response,
    confirm: bool = False,
    session_id: Optional[str] = Depends(get_session_id),
    registry: SessionRegistry = Depends(get_registry),
):
    registry.cancel(session_id, confirm=lambda _: confirm)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"status": "success"}


@router.get("/result", response_model=EvaluationResult)
async def get_result(
    session_id: Optional[str] = Depends(get_session_id),
    registry: SessionRegistry = Depends(get_registry),
):
    return registry.result(session_id)


@router.post("/result/retry", response_model=Prompt)
async def retry_test(
    response: Response,
    mode: str = Form("incorrect"),
    session_id: Optional[str] = Depends(get_session_id),
    registry: SessionRegistry = Depends(get_registry),
):
    new_id, _ = registry.retry(session_id, mode)
    _set_session_cookie(response, new_id)
    return registry.prompt(new_id)
