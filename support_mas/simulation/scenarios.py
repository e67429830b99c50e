"""
Built-in scenarios - scripted customer conversations used as release regression tests
"""
from typing import Any, Dict, List

from ..models.scenario import Scenario


def _scenario(scenario_id: str, name: str, description: str, inputs: List[Dict[str, Any]], **expected: Any) -> Scenario:
    return Scenario.model_validate({
        "id": scenario_id,
        "name": name,
        "description": description,
        "inputs": [{"step": i, **turn} for i, turn in enumerate(inputs, start=1)],
        "expected_outcome": expected,
        "status": "pending",
    })


PRESENTATION_SCENARIOS: List[Scenario] = [
    # Order management
    _scenario(
        "SCENE-001", "Order Status Inquiry", "Customer asks about order status - happy path",
        [
            {"customer_message": "Hi, I placed an order last week. Can you tell me where it is?", "expected_intent": "ORDER_STATUS"},
            {"customer_message": "The order number is #1234567", "expected_intent": "ORDER_STATUS"},
        ],
        escalated=False, agent_sequence=["order-agent"], tools_called=["get_order", "get_tracking"],
        final_message_contains=["order", "status"]
    ),
    _scenario(
        "SCENE-002", "Order Modification", "Customer wants to change shipping address",
        [
            {"customer_message": "I need to change the address on my order #7654321", "expected_intent": "ORDER_MODIFY"},
            {"customer_message": "New address is 123 Main St, New York, NY 10001", "expected_intent": "ORDER_MODIFY"},
        ],
        escalated=False, agent_sequence=["order-agent"], tools_called=["get_order", "update_order"],
        final_message_contains=["address", "updated"]
    ),
    # Subscription management
    _scenario(
        "SCENE-003", "Subscription Cancel Request", "Customer wants to cancel subscription",
        [{"customer_message": "I want to cancel my subscription", "expected_intent": "SUBSCRIPTION_CANCEL"}],
        escalated=False, agent_sequence=["subscription-agent"],
        tools_called=["get_subscription", "cancel_subscription"],
        final_message_contains=["cancel", "subscription"]
    ),
    _scenario(
        "SCENE-004", "Subscription Pause", "Customer pauses subscription for vacation",
        [{"customer_message": "I'm going on vacation for 3 weeks, can I pause my subscription?", "expected_intent": "SUBSCRIPTION_PAUSE"}],
        escalated=False, agent_sequence=["subscription-agent"],
        tools_called=["get_subscription", "pause_subscription"],
        final_message_contains=["pause", "week"]
    ),
    # Refunds
    _scenario(
        "SCENE-005", "Simple Refund Request", "Customer requests refund for defective item",
        [
            {"customer_message": "I received a defective product and need a refund", "expected_intent": "REFUND_REQUEST"},
            {"customer_message": "Order #9876543, the packaging was damaged", "expected_intent": "REFUND_REQUEST"},
        ],
        escalated=False, agent_sequence=["refund-agent"], tools_called=["get_order", "create_refund"],
        final_message_contains=["refund", "process"]
    ),
    # Escalation
    _scenario(
        "SCENE-006", "Explicit Human Request", "Customer explicitly asks for human agent",
        [{"customer_message": "I want to speak to a human representative", "expected_intent": "ESCALATION"}],
        escalated=True, agent_sequence=[], final_message_contains=["escalat", "team"]
    ),
    _scenario(
        "SCENE-007", "Frustrated Customer", "Customer expresses frustration, triggers escalation",
        [
            {"customer_message": "This is ridiculous! I've been waiting 2 weeks for my order!", "expected_intent": "ORDER_STATUS"},
            {"customer_message": "I'm done with your useless bot, get me a real person!", "expected_intent": "ESCALATION"},
        ],
        escalated=True, agent_sequence=["order-agent"], final_message_contains=["escalat", "specialist"]
    ),
    _scenario(
        "SCENE-008", "Complex Legal Issue", "Customer mentions legal action",
        [{"customer_message": "I'm going to contact my lawyer about this fraudulent charge", "expected_intent": "ESCALATION"}],
        escalated=True, agent_sequence=[], final_message_contains=["escalat", "senior"]
    ),
    # Product inquiries
    _scenario(
        "SCENE-009", "Product Information", "Customer asks about product details",
        [{"customer_message": "What ingredients are in the Sleep Patches?", "expected_intent": "PRODUCT_INFO"}],
        escalated=False, agent_sequence=["product-agent"], final_message_contains=["ingredient", "natural"]
    ),
    # Multi-turn
    _scenario(
        "SCENE-010", "Complex Multi-Turn", "Customer has multiple issues in one session",
        [
            {"customer_message": "I have a few questions about my account", "expected_intent": "GENERAL"},
            {"customer_message": "First, where is my order #1111111?", "expected_intent": "ORDER_STATUS"},
            {"customer_message": "Also, I want to change my subscription frequency", "expected_intent": "SUBSCRIPTION_MODIFY"},
            {"customer_message": "Thanks for your help!", "expected_intent": "GENERAL"},
        ],
        escalated=False, agent_sequence=["order-agent", "subscription-agent"],
        final_message_contains=["welcome", "help"]
    ),
]

EDGE_CASE_SCENARIOS: List[Scenario] = [
    _scenario(
        "EDGE-001", "Empty Message", "Customer sends empty or whitespace message",
        [{"customer_message": "   ", "expected_intent": "UNCLEAR"}],
        escalated=False, agent_sequence=["general-agent"], final_message_contains=["help", "assist"]
    ),
    _scenario(
        "EDGE-002", "Non-English Message", "Customer writes in Spanish",
        [{"customer_message": "Hola, necesito ayuda con mi pedido", "expected_intent": "ORDER_STATUS"}],
        escalated=False, agent_sequence=["general-agent"], final_message_contains=["order", "help"]
    ),
    _scenario(
        "EDGE-003", "Very Long Message", "Customer sends extremely long message",
        [{
            "customer_message": (
                "I have been a loyal customer for 5 years and I have to say that this is the worst "
                "experience I have ever had with any company. First my order was delayed by 2 weeks, "
                "then when it finally arrived the package was completely damaged. I tried calling your "
                "customer service number but was on hold for 45 minutes before giving up. Then I sent an "
                "email and got an automated response saying someone would get back to me in 24-48 hours "
                "but it has now been a week and I still have not heard from anyone. This is completely "
                "unacceptable and I am seriously considering taking my business elsewhere unless this is "
                "resolved immediately."
            ),
            "expected_intent": "ORDER_STATUS",
        }],
        escalated=True, agent_sequence=[], final_message_contains=["sorry", "escalat"]
    ),
]

CATEGORIES = {
    "order": ["SCENE-001", "SCENE-002"],
    "subscription": ["SCENE-003", "SCENE-004"],
    "refund": ["SCENE-005"],
    "escalation": ["SCENE-006", "SCENE-007", "SCENE-008"],
    "product": ["SCENE-009"],
    "multi-turn": ["SCENE-010"],
}


def get_all_scenarios() -> List[Scenario]:
    """Fresh, pending copies of every built-in scenario."""
    return [s.model_copy(deep=True) for s in PRESENTATION_SCENARIOS + EDGE_CASE_SCENARIOS]


def get_scenarios_by_category(category: str) -> List[Scenario]:
    """
    Fresh copies of the scenarios in one category.

    Args:
        category: order, subscription, refund, escalation, product, multi-turn or edge

    Returns:
        Matching scenarios; empty for an unknown category
    """
    if category == "edge":
        return [s.model_copy(deep=True) for s in EDGE_CASE_SCENARIOS]
    ids = CATEGORIES.get(category, [])
    return [s.model_copy(deep=True) for s in PRESENTATION_SCENARIOS if s.id in ids]
