#!/usr/bin/env python3
"""
Demo script showing PayStream agent capabilities.

Runs three sample payments through the four-agent consensus panel, then lets
the x402 payment agent pay two simulated 402 challenges.
"""

import asyncio
from decimal import Decimal

from paystream.main import build_orchestrator
from paystream.schemas.payment import PaymentRequest, Urgency
from paystream.services.x402_service import X402PaymentAgent
from paystream.x402.requirement import PaymentMode, PaymentRequirement

DEMO_PAYMENTS = [
    PaymentRequest(
        sender="0x1234...abcd",
        recipient="0x5678...efgh",
        amount=Decimal("1000"),
        description="Monthly subscription payment",
        urgency=Urgency.MEDIUM,
    ),
    PaymentRequest(
        sender="0xaaaa...bbbb",
        recipient="0xcccc...dddd",
        amount=Decimal("50000"),
        description="Large vendor payment - Q4 services",
        urgency=Urgency.HIGH,
    ),
    PaymentRequest(
        sender="0x9999...0000",
        recipient="0x1111...2222",
        amount=Decimal("100"),
        description="Urgent emergency fund transfer",
        urgency=Urgency.CRITICAL,
    ),
]

DEMO_CHALLENGES = [
    (
        "https://api.example.com/weather",
        PaymentRequirement(
            recipient="0x1f973bc13Fe975570949b09C022dCCB46944F5ED",
            mode=PaymentMode.STREAMING,
            rate_per_second="0.0001",
            min_deposit="1.00",
            description="Real-time weather data",
        ),
    ),
    (
        "https://api.example.com/translate",
        PaymentRequirement(
            recipient="0x1f973bc13Fe975570949b09C022dCCB46944F5ED",
            mode=PaymentMode.PER_REQUEST,
            amount="0.01",
            description="Translation API",
        ),
    ),
]


async def demo_consensus():
    """Evaluate the demo payments with the agent panel."""
    orchestrator = build_orchestrator()
    print(f"✅ {orchestrator.agent_count()} agents initialized and ready")

    for payment in DEMO_PAYMENTS:
        print("\n📋 Processing Payment Request")
        print(f"   ID: {payment.id}")
        print(f"   Amount: {payment.amount} CRO")
        print(f"   To: {payment.recipient}")
        print(f"   Description: {payment.description}")

        decision = await orchestrator.process_payment(payment)

        print("\n📊 Agent Decisions:")
        for agent_decision in decision.agent_decisions:
            print(
                f"   [{agent_decision.agent_id}] {agent_decision.action.value} - "
                f"{agent_decision.reason} (confidence: {agent_decision.confidence:.2f})"
            )
        print(f"\n🎯 Final Decision: {decision.final_action.value}")
        print(f"   Consensus Score: {decision.consensus_score:.2f}")
        print(f"   Summary: {decision.summary}")
        print("   ----------------------------------------")


async def demo_x402():
    """Pay simulated 402 challenges with the payment agent."""
    async with X402PaymentAgent() as agent:
        for url, requirement in DEMO_CHALLENGES:
            result = await agent.simulate_challenge(url, requirement)
            print(f"\n📡 {url}: {result.state.value} (status {result.status})")
            if result.stream_id is not None:
                print(f"   Stream ID: #{result.stream_id}")
            if result.tx_hash is not None:
                print(f"   TX: {result.tx_hash[:16]}...")
            print(f"   Spent: {result.amount_spent}")
            print(f"   Body: {result.body}")
        print()
        print(agent.stats.display())


async def main():
    print("🚀 PayStream - Autonomous Payment Agents")
    print("=" * 50)
    await demo_consensus()
    await demo_x402()
    print("\n✨ PayStream demo complete!")


if __name__ == "__main__":
    asyncio.run(main())
