"""Question payloads stored on an assignment, one model per question type.

The ``type`` field selects the model, so a matching question without pairs
or a multiple-choice question whose answer index is out of range is rejected
at the API boundary.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, model_validator


class _QuestionBase(BaseModel):
    prompt: str = Field(min_length=1)
    points: int = Field(default=1, ge=1)


class MultipleChoiceQuestion(_QuestionBase):
    type: Literal["multiple-choice"]
    options: list[str] = Field(min_length=2)
    correct_option: int = Field(ge=0)

    @model_validator(mode="after")
    def _answer_in_range(self):
        if self.correct_option >= len(self.options):
            raise ValueError("correct_option must index one of the options")
        return self


class TrueFalseQuestion(_QuestionBase):
    type: Literal["true-false"]
    correct_answer: bool


class MatchingPair(BaseModel):
    left: str
    right: str


class MatchingQuestion(_QuestionBase):
    type: Literal["matching"]
    pairs: list[MatchingPair] = Field(min_length=2)


class DragAndDropQuestion(_QuestionBase):
    type: Literal["drag-and-drop"]
    subtype: Literal["ordering", "categorization", "fill-blank", "labeling"]
    items: list[str] = Field(min_length=1)
    # Ordering: the correct order of ``items``; categorization: item -> category
    solution: list[str] | dict[str, str] | None = None


class OpenResponseQuestion(_QuestionBase):
    type: Literal["writing", "writing-long", "speaking", "listening"]
    min_words: int | None = Field(default=None, ge=0)
    max_words: int | None = Field(default=None, ge=1)
    time_limit_seconds: int | None = Field(default=None, ge=1)


Question = Annotated[
    Union[
        MultipleChoiceQuestion,
        TrueFalseQuestion,
        MatchingQuestion,
        DragAndDropQuestion,
        OpenResponseQuestion,
    ],
    Field(discriminator="type"),
]
