"""
Tests for the transformers-backed reader.

The pipeline factory is replaced with a fake so no model is downloaded.
"""

import pytest

from docsearch.domain.entities import Document
from docsearch.domain.exceptions import ReaderUnavailableException
from docsearch.services.reader import TransformersReader


class FakeQAPipeline:
    """Callable mimicking a question-answering pipeline."""

    def __init__(self, spans):
        # spans: document content -> list of (answer, score)
        self.spans = spans
        self.calls = []

    def __call__(self, question, context, top_k):
        self.calls.append((question, context, top_k))
        results = []
        for answer, score in self.spans.get(context, []):
            start = context.find(answer) if answer else 0
            results.append(
                {"answer": answer, "score": score, "start": start, "end": start + len(answer)}
            )
        if top_k == 1 and results:
            return results[0]
        return results


@pytest.fixture
def documents():
    return [
        Document(id="arya", content="Arya Stark is the daughter of Eddard Stark.", meta={"name": "a"}),
        Document(id="jon", content="Jon Snow was raised by Eddard Stark."),
    ]


def make_reader(pipeline, calls=None):
    def factory(model_name, device):
        if calls is not None:
            calls.append((model_name, device))
        return pipeline

    return TransformersReader("test-model", pipeline_factory=factory)


class TestTransformersReader:
    @pytest.mark.asyncio
    async def test_answers_sorted_across_documents(self, documents):
        pipeline = FakeQAPipeline(
            {
                documents[0].content: [("Eddard Stark", 0.6)],
                documents[1].content: [("Eddard Stark", 0.9), ("Jon Snow", 0.1)],
            }
        )
        reader = make_reader(pipeline)

        answers = await reader.predict("Who is the father?", documents, top_k=2)

        assert [(a.document_id, a.score) for a in answers] == [("jon", 0.9), ("arya", 0.6)]
        first = answers[0]
        start, end = first.offsets_in_document
        assert documents[1].content[start:end] == "Eddard Stark"
        cstart, cend = first.offsets_in_context
        assert first.context[cstart:cend] == "Eddard Stark"
        assert answers[1].meta == {"name": "a"}

    @pytest.mark.asyncio
    async def test_single_prediction_dict_is_accepted(self, documents):
        pipeline = FakeQAPipeline({documents[0].content: [("Arya Stark", 0.8)]})
        reader = make_reader(pipeline)

        answers = await reader.predict("Who?", documents[:1], top_k=1)

        assert [a.answer for a in answers] == ["Arya Stark"]

    @pytest.mark.asyncio
    async def test_empty_answers_dropped(self, documents):
        pipeline = FakeQAPipeline({documents[0].content: [("", 0.99)]})
        reader = make_reader(pipeline)

        assert await reader.predict("Who?", documents[:1], top_k=3) == []

    @pytest.mark.asyncio
    async def test_model_loaded_once_and_lazily(self, documents):
        calls = []
        reader = make_reader(FakeQAPipeline({}), calls)

        assert await reader.predict("Who?", [], top_k=3) == []
        assert reader.is_loaded is False

        await reader.predict("Who?", documents, top_k=3)
        await reader.predict("Who?", documents, top_k=3)

        assert calls == [("test-model", -1)]

    @pytest.mark.asyncio
    async def test_load_failure(self, documents):
        def broken_factory(model_name, device):
            raise OSError("model not found")

        reader = TransformersReader("missing-model", pipeline_factory=broken_factory)

        with pytest.raises(ReaderUnavailableException, match="model not found"):
            await reader.predict("Who?", documents, top_k=1)

    @pytest.mark.asyncio
    async def test_inference_failure(self, documents):
        def failing_pipeline(question, context, top_k):
            raise RuntimeError("CUDA out of memory")

        reader = make_reader(failing_pipeline)

        with pytest.raises(ReaderUnavailableException, match="CUDA out of memory"):
            await reader.predict("Who?", documents, top_k=1)

    def test_gpu_device_selection(self):
        assert TransformersReader("m", use_gpu=True).device == 0
        assert TransformersReader("m").device == -1
