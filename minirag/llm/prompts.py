"""Prompt templates for answering from retrieved documents."""

from abc import ABC, abstractmethod

from minirag.documents.models import Document


class PromptTemplate(ABC):
    """Abstract base class for prompt templates."""

    @abstractmethod
    def build_prompt(self, question: str, documents: list[Document]) -> str:
        """Build the complete prompt for ``question``.

        Args:
            question: User question.
            documents: Retrieved context documents, best first.

        Returns:
            Prompt text.
        """
        ...


class RAGPromptTemplate(PromptTemplate):
    """General document question-answering prompt."""

    DEFAULT_INSTRUCTIONS = (
        "你是一个专业的文档问答助手。请根据提供的文档内容准确回答问题。\n"
        "如果文档中没有相关信息，请诚实地告知用户。\n\n"
    )

    DEFAULT_QUESTION_TEMPLATE = "基于以上文档内容，请回答以下问题：\n问题：{question}\n\n回答："

    def __init__(
        self,
        instructions: str | None = None,
        question_template: str | None = None,
    ) -> None:
        """Initialize the RAG prompt template.

        Args:
            instructions: Custom leading instructions.
            question_template: Custom question section, with ``{question}``.
        """
        self.instructions = instructions or self.DEFAULT_INSTRUCTIONS
        self.question_template = question_template or self.DEFAULT_QUESTION_TEMPLATE

    def format_context(self, documents: list[Document]) -> str:
        """Format documents as numbered, attributed context blocks."""
        blocks = [
            f"【来源{i}:{doc.filename}】\n{doc.content}\n\n"
            for i, doc in enumerate(documents, start=1)
        ]
        return "相关文档内容：\n" + "".join(blocks)

    def build_prompt(self, question: str, documents: list[Document]) -> str:
        return (
            self.instructions
            + self.format_context(documents)
            + self.question_template.format(question=question)
        )


class RefundPromptTemplate(PromptTemplate):
    """Customer-service prompt for refund and return questions."""

    INSTRUCTIONS = (
        "你是一个专业的电商客服助手，专门处理退款相关咨询。\n"
        "请根据提供的文档信息，清晰、准确地回答用户的退款流程问题。\n\n"
    )

    REQUIREMENTS = (
        "请按照以下要求回答：\n"
        "1. 如果文档中有明确的退款流程，请分步骤说明\n"
        "2. 如果文档中有时间要求，请明确指出\n"
        "3. 如果文档中有联系方式，请提供\n"
        "4. 使用友好、专业的语气\n"
        "5. 如果文档中没有相关信息，请诚实地告知\n\n"
    )

    KEYWORDS = ("退款", "退货")

    def build_prompt(self, question: str, documents: list[Document]) -> str:
        blocks = [
            f"===== 文档 {i} ======\n{doc.content}\n\n"
            for i, doc in enumerate(documents, start=1)
        ]
        return (
            self.INSTRUCTIONS
            + "相关文档信息：\n"
            + "".join(blocks)
            + f"用户问题：{question}\n\n"
            + self.REQUIREMENTS
            + "回答："
        )

    @classmethod
    def matches(cls, question: str) -> bool:
        """True if ``question`` is about refunds or returns."""
        return any(keyword in question for keyword in cls.KEYWORDS)


def select_prompt_template(question: str) -> PromptTemplate:
    """Pick the refund template for refund questions, the general one otherwise."""
    if RefundPromptTemplate.matches(question):
        return RefundPromptTemplate()
    return RAGPromptTemplate()
