"""
Classification calls: a second completion request whose answer must be exactly one
label from a closed set. The answer is parsed strictly and never coerced.
"""

import logging
from typing import FrozenSet, Literal, Sequence, Type

from langchain_core.exceptions import OutputParserException
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage
from langchain_core.output_parsers import PydanticOutputParser
from pydantic import BaseModel, Field

from langcorp_agents.errors import ClassificationError
from langcorp_agents.models.invoke import invoke_model, message_text
from langcorp_agents.routing import Representative, Trigger


logger = logging.getLogger(__name__)


class InitialRoutingDecision(BaseModel):
    """A Pydantic schema for the frontline routing decision."""

    # The JSON key matches what the routing prompt asks for.
    next_representative: Literal["BILLING", "TECHNICAL", "RESPOND"] = Field(
        alias="nextRepresentative",
        description="Which team the representative is routing the user to, or RESPOND if none.",
    )


class BillingRoutingDecision(BaseModel):
    """A Pydantic schema for the billing specialist's refund decision."""

    next_representative: Literal["REFUND", "RESPOND"] = Field(
        alias="nextRepresentative",
        description="REFUND if the representative wants to refund the user, otherwise RESPOND.",
    )


def format_instructions(schema: Type[BaseModel]) -> str:
    return PydanticOutputParser(pydantic_object=schema).get_format_instructions()


def classify(
    model: BaseChatModel,
    messages: Sequence[BaseMessage],
    schema: Type[BaseModel],
    allowed: FrozenSet[Trigger],
) -> Representative:
    """Runs the classification request and returns the label, or raises ClassificationError."""
    parser = PydanticOutputParser(pydantic_object=schema)
    response = invoke_model(model, messages)
    raw_output = message_text(response)

    try:
        decision = parser.parse(raw_output)
    except OutputParserException as e:
        logger.error("Unparseable routing decision: %r", raw_output)
        raise ClassificationError(
            f"Routing decision is not one of {sorted(t.value for t in allowed)}: {raw_output!r}",
            raw_output=raw_output,
        ) from e

    label = Representative(decision.next_representative)

    # The schema already restricts the label; this guards a schema that drifts from the table.
    if Trigger.from_label(label) not in allowed:
        raise ClassificationError(
            f"Routing label {label.value} is not allowed here; expected one of {sorted(t.value for t in allowed)}",
            raw_output=raw_output,
        )

    logger.info("Routing decision: %s", label.value)
    return label
