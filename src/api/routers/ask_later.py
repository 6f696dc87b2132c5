"""
Ask-later endpoints.

``/answer`` answers one question synchronously. The ``/queue`` endpoints
keep questions in memory and generate their answers in the background;
clients poll an entry until its status leaves ``processing``.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException

from ..dependencies.flows import run_flow
from ..dependencies.session import get_model_manager, get_question_queue
from ..models.ask_later import QueueQuestionRequest, QueuedQuestionData, QueuedQuestionResponse, QuestionQueueResponse
from ..models.generation import AskLaterResponse
from src.flows.ask_later import AskLaterFlow
from src.flows.ask_later_queue import QuestionQueue, QuestionStatus
from src.flows.types import AskLaterInput
from src.models.manager import ModelManager

router = APIRouter()

@router.post("/answer", response_model=AskLaterResponse)
async def answer_now(
    request: AskLaterInput,
    model_manager: ModelManager = Depends(get_model_manager)
):
    result = await run_flow(AskLaterFlow(model_manager), request)
    return AskLaterResponse(success=True, message="Answer generated successfully", data=result)

@router.post("/queue", response_model=QueuedQuestionResponse, status_code=202)
async def queue_question(
    request: QueueQuestionRequest,
    background_tasks: BackgroundTasks,
    queue: QuestionQueue = Depends(get_question_queue),
    model_manager: ModelManager = Depends(get_model_manager)
):
    entry = queue.enqueue(request.question, request.language)
    background_tasks.add_task(queue.answer, entry.id, AskLaterFlow(model_manager))
    return QueuedQuestionResponse(success=True, message="Question queued", data=QueuedQuestionData.from_entry(entry))

@router.get("/queue", response_model=QuestionQueueResponse)
async def list_questions(queue: QuestionQueue = Depends(get_question_queue)):
    entries = queue.list()
    return QuestionQueueResponse(
        success=True,
        message=f"{len(entries)} queued questions",
        data=[QueuedQuestionData.from_entry(e) for e in entries]
    )

@router.get("/queue/{question_id}", response_model=QueuedQuestionResponse)
async def get_question(question_id: str, queue: QuestionQueue = Depends(get_question_queue)):
    entry = queue.get(question_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Question {question_id} not found")
    return QueuedQuestionResponse(success=True, data=QueuedQuestionData.from_entry(entry))

@router.post("/queue/{question_id}/regenerate", response_model=QueuedQuestionResponse, status_code=202)
async def regenerate_answer(
    question_id: str,
    background_tasks: BackgroundTasks,
    queue: QuestionQueue = Depends(get_question_queue),
    model_manager: ModelManager = Depends(get_model_manager)
):
    entry = queue.get(question_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Question {question_id} not found")
    if entry.status == QuestionStatus.PROCESSING:
        raise HTTPException(status_code=409, detail=f"Question {question_id} is still being answered")

    entry = queue.reset(question_id)
    background_tasks.add_task(queue.answer, entry.id, AskLaterFlow(model_manager))
    return QueuedQuestionResponse(success=True, message="Regenerating answer", data=QueuedQuestionData.from_entry(entry))

@router.delete("/queue/{question_id}", response_model=QueuedQuestionResponse)
async def delete_question(question_id: str, queue: QuestionQueue = Depends(get_question_queue)):
    if not queue.delete(question_id):
        raise HTTPException(status_code=404, detail=f"Question {question_id} not found")
    return QueuedQuestionResponse(success=True, message="Question removed")
