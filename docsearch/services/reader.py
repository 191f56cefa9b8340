"""
Extractive question answering readers.

A reader takes a question and retrieved documents and extracts answer
spans from the document text. The default implementation wraps a
Hugging Face transformers ``question-answering`` pipeline.
"""

import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

import structlog
from starlette.concurrency import run_in_threadpool

from ..domain.entities import Answer, Document, make_context
from ..domain.exceptions import ReaderUnavailableException
from ..metrics import reader_inference_duration_seconds

logger = structlog.get_logger(__name__)

PipelineFactory = Callable[[str, int], Callable[..., Any]]


def default_pipeline_factory(model_name: str, device: int) -> Callable[..., Any]:
    """Build a transformers question-answering pipeline."""
    from transformers import pipeline

    return pipeline(
        "question-answering",
        model=model_name,
        tokenizer=model_name,
        device=device,
    )


class IAnswerReader(ABC):
    """Abstract reader interface."""

    @abstractmethod
    async def predict(
        self, question: str, documents: List[Document], top_k: int
    ) -> List[Answer]:
        """
        Extract answers for a question from documents.

        Args:
            question: Natural-language question
            documents: Candidate documents, typically from keyword retrieval
            top_k: Maximum number of answers to return

        Returns:
            Answers sorted by score, best first
        """
        pass


class TransformersReader(IAnswerReader):
    """
    Reader backed by a transformers question-answering pipeline.

    The model is loaded on first use and shared across requests. Inference
    runs in the thread pool so the event loop is never blocked.
    """

    def __init__(
        self,
        model_name: str,
        use_gpu: bool = False,
        pipeline_factory: Optional[PipelineFactory] = None,
        context_window: int = 150,
    ) -> None:
        self.model_name = model_name
        self.device = 0 if use_gpu else -1
        self.context_window = context_window
        self._pipeline_factory = pipeline_factory or default_pipeline_factory
        self._pipeline: Optional[Callable[..., Any]] = None
        self._load_lock = threading.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._pipeline is not None

    def _load(self) -> Callable[..., Any]:
        with self._load_lock:
            if self._pipeline is None:
                logger.info("Loading reader model", model=self.model_name, device=self.device)
                try:
                    self._pipeline = self._pipeline_factory(self.model_name, self.device)
                except Exception as e:
                    logger.error("Reader model failed to load", model=self.model_name, error=str(e))
                    raise ReaderUnavailableException(self.model_name, str(e)) from e
        return self._pipeline

    def _predict_sync(self, question: str, documents: List[Document], top_k: int) -> List[Answer]:
        qa = self._load()
        answers: List[Answer] = []

        for document in documents:
            try:
                raw = qa(question=question, context=document.content, top_k=top_k)
            except Exception as e:
                logger.error(
                    "Reader inference failed", model=self.model_name, document_id=document.id
                )
                raise ReaderUnavailableException(self.model_name, str(e)) from e

            predictions: List[Dict[str, Any]] = raw if isinstance(raw, list) else [raw]
            for prediction in predictions:
                text = (prediction.get("answer") or "").strip()
                if not text:
                    continue
                start, end = int(prediction["start"]), int(prediction["end"])
                context, context_offsets = make_context(
                    document.content, start, end, self.context_window
                )
                answers.append(
                    Answer(
                        answer=text,
                        score=float(prediction["score"]),
                        context=context,
                        document_id=document.id,
                        offsets_in_document=(start, end),
                        offsets_in_context=context_offsets,
                        meta=dict(document.meta),
                    )
                )

        answers.sort(key=lambda answer: answer.score, reverse=True)
        return answers[:top_k]

    async def predict(
        self, question: str, documents: List[Document], top_k: int
    ) -> List[Answer]:
        if not documents or top_k <= 0:
            return []

        start_time = time.time()
        answers = await run_in_threadpool(self._predict_sync, question, documents, top_k)
        reader_inference_duration_seconds.observe(time.time() - start_time)

        logger.info(
            "Reader finished",
            documents=len(documents),
            answers=len(answers),
            duration_ms=round((time.time() - start_time) * 1000, 2),
        )
        return answers
