from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone

# Pricing per token by API model name
MODEL_PRICING = {
    "gpt-4o-mini": {"input": 0.15 / 1_000_000, "output": 0.60 / 1_000_000},
    "gpt-4o": {"input": 2.50 / 1_000_000, "output": 10.00 / 1_000_000},
    "llama-3.3-70b-versatile": {"input": 0.59 / 1_000_000, "output": 0.79 / 1_000_000},
    "claude-haiku-4-5-20251001": {"input": 0.80 / 1_000_000, "output": 4.00 / 1_000_000},
    "claude-sonnet-4-5-20250929": {"input": 3.00 / 1_000_000, "output": 15.00 / 1_000_000},
}


@dataclass
class UsageRecord:
    timestamp: str
    board_id: str
    model: str
    route: str  # "template" or "loop"
    archetype: str
    completions: int
    tool_calls: int
    input_tokens: int
    output_tokens: int
    cost_usd: float


@dataclass
class UsageTracker:
    """Bounded in-memory ledger of per-command model usage."""

    records: deque = field(default_factory=lambda: deque(maxlen=10000))

    def record(
        self,
        board_id: str,
        model: str,
        route: str,
        completions: int,
        tool_calls: int,
        input_tokens: int,
        output_tokens: int,
        archetype: str = "",
    ) -> float:
        pricing = MODEL_PRICING.get(model, {"input": 0, "output": 0})
        cost = input_tokens * pricing["input"] + output_tokens * pricing["output"]
        self.records.append(
            UsageRecord(
                timestamp=datetime.now(timezone.utc).isoformat(),
                board_id=board_id,
                model=model,
                route=route,
                archetype=archetype,
                completions=completions,
                tool_calls=tool_calls,
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                cost_usd=cost,
            )
        )
        return cost

    def get_summary(self) -> dict:
        by_route: dict[str, dict] = {}
        for r in self.records:
            if r.route not in by_route:
                by_route[r.route] = {"commands": 0, "completions": 0, "tool_calls": 0, "cost_usd": 0.0}
            by_route[r.route]["commands"] += 1
            by_route[r.route]["completions"] += r.completions
            by_route[r.route]["tool_calls"] += r.tool_calls
            by_route[r.route]["cost_usd"] += r.cost_usd

        return {
            "total_commands": len(self.records),
            "total_cost_usd": round(sum(r.cost_usd for r in self.records), 6),
            "total_input_tokens": sum(r.input_tokens for r in self.records),
            "total_output_tokens": sum(r.output_tokens for r in self.records),
            "by_route": by_route,
            "recent": [
                {
                    "timestamp": r.timestamp,
                    "board_id": r.board_id,
                    "route": r.route,
                    "archetype": r.archetype,
                    "completions": r.completions,
                    "tool_calls": r.tool_calls,
                    "cost_usd": round(r.cost_usd, 6),
                }
                for r in list(self.records)[-20:]
            ],
        }
