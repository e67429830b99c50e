"""
Agent Registry - builds the default customer-service agent roster
"""
from typing import Any, Dict, List, Optional

from ..models.runtime import AgentDefinition, MASConfig, ToolDefinition


def tool(name: str, description: str, required: Optional[List[str]] = None, **properties: Dict[str, Any]) -> ToolDefinition:
    """Declare a tool with a JSON-schema object of parameters."""
    return ToolDefinition(
        name=name,
        description=description,
        parameters={
            "type": "object",
            "properties": properties,
            "required": list(required if required is not None else properties)
        }
    )


ORDER_NUMBER = {"type": "string", "description": "Order number, e.g. #1234567"}

GET_ORDER = tool("get_order", "Look up an order by number", order_number=ORDER_NUMBER)
GET_TRACKING = tool("get_tracking", "Get carrier tracking for an order", order_number=ORDER_NUMBER)
UPDATE_ORDER = tool(
    "update_order",
    "Change the shipping address of an unfulfilled order",
    order_number=ORDER_NUMBER,
    shipping_address={"type": "string"}
)
GET_SUBSCRIPTION = tool("get_subscription", "Fetch the customer's active subscription")
CANCEL_SUBSCRIPTION = tool(
    "cancel_subscription",
    "Cancel the customer's subscription",
    required=[],
    reason={"type": "string"}
)
PAUSE_SUBSCRIPTION = tool(
    "pause_subscription",
    "Pause the subscription for a number of weeks",
    weeks={"type": "integer", "minimum": 1, "maximum": 12}
)
UPDATE_SUBSCRIPTION = tool(
    "update_subscription",
    "Change delivery frequency",
    frequency_days={"type": "integer"}
)
CREATE_REFUND = tool(
    "create_refund",
    "Refund an order",
    order_number=ORDER_NUMBER,
    reason={"type": "string"}
)
SEARCH_PRODUCTS = tool("search_products", "Search the product catalogue", query={"type": "string"})
CREATE_HANDOFF = tool(
    "create_handoff",
    "Open a ticket for a human specialist",
    reason={"type": "string"}
)


def _prompt(brand_name: str, role: str) -> str:
    return (
        f"You are a customer-service agent for {brand_name}. {role} "
        "Be concise and friendly. If the customer asks for a human, threatens legal action "
        "or you cannot resolve the request, say that you are escalating to the team."
    )


def build_default_mas(brand_name: str) -> MASConfig:
    """
    Build the default agent roster for a brand.

    Args:
        brand_name: Brand the agents speak for

    Returns:
        MASConfig with order, subscription, refund, product, general and escalation agents
    """
    agents = [
        AgentDefinition(
            id="order-agent",
            name="Order Agent",
            description="Order status, tracking and address changes",
            system_prompt=_prompt(brand_name, "You handle order status, tracking and order changes."),
            intents=["ORDER_STATUS", "ORDER_MODIFY"],
            tools=[GET_ORDER, GET_TRACKING, UPDATE_ORDER]
        ),
        AgentDefinition(
            id="subscription-agent",
            name="Subscription Agent",
            description="Subscription cancel, pause and frequency changes",
            system_prompt=_prompt(brand_name, "You manage subscriptions: cancel, pause and frequency changes."),
            intents=["SUBSCRIPTION_CANCEL", "SUBSCRIPTION_PAUSE", "SUBSCRIPTION_MODIFY"],
            tools=[GET_SUBSCRIPTION, CANCEL_SUBSCRIPTION, PAUSE_SUBSCRIPTION, UPDATE_SUBSCRIPTION]
        ),
        AgentDefinition(
            id="refund-agent",
            name="Refund Agent",
            description="Refunds for damaged or defective items",
            system_prompt=_prompt(brand_name, "You process refunds for damaged or defective items."),
            intents=["REFUND_REQUEST"],
            tools=[GET_ORDER, CREATE_REFUND]
        ),
        AgentDefinition(
            id="product-agent",
            name="Product Agent",
            description="Product details and ingredients",
            system_prompt=_prompt(brand_name, "You answer questions about products and ingredients."),
            intents=["PRODUCT_INFO"],
            tools=[SEARCH_PRODUCTS]
        ),
        AgentDefinition(
            id="general-agent",
            name="General Agent",
            description="Greetings, unclear requests and everything else",
            system_prompt=_prompt(brand_name, "You greet customers and help with general questions."),
            intents=["GENERAL", "UNCLEAR"]
        ),
        AgentDefinition(
            id="escalation-agent",
            name="Escalation Agent",
            description="Hands the conversation to a human specialist",
            system_prompt=_prompt(
                brand_name,
                "The conversation is being escalated. Apologize if appropriate and tell the "
                "customer a specialist from the team will take over."
            ),
            intents=["ESCALATION"],
            tools=[CREATE_HANDOFF]
        ),
    ]
    return MASConfig(brand_name=brand_name, agents=agents)
