"""Prompt templates sent to the vision model."""

DESCRIPTION_TEMPLATE = """Please analyze this image in detail.
Include the following in your description:

1. Overall description of the scene
2. Main objects or things in the image
3. Colors and mood
4. If there are people, what they are doing
5. The background environment
6. Anything unusual or striking

Please describe it in {language}, in a detailed and friendly way."""

QUESTION_TEMPLATE = """Look at this image and answer the following question: {question}

Please answer in {language}, in detail and accurately."""


def build_prompt(question: str | None = None, language: str = "English") -> str:
    """Build the text prompt that accompanies the image.

    Args:
        question: Optional user question. Blank questions are treated as
            absent and produce the general description prompt.
        language: Language the model should answer in.

    Returns:
        Prompt text.
    """
    if question is None or not question.strip():
        return DESCRIPTION_TEMPLATE.format(language=language)
    return QUESTION_TEMPLATE.format(question=question, language=language)
