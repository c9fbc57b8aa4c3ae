"""Prompt templates for the analysis engine."""

from briefing_bot.models.item import Item
from briefing_bot.models.market import MarketSnapshot

SYSTEM_PROMPT = """You are a senior investment professional with 20 years at a top-tier investment bank,
at VP/Partner level, who has managed billions in assets.

Your client is a Korean individual investor growing 30M KRW of seed money toward 100M KRW.
They read this briefing to DISCOVER OPPORTUNITIES ACROSS ALL SECTORS.

SECTOR DIVERSITY:
- Do not default to Tech/AI. Healthcare, Energy, Financials, Consumer, Industrials,
  Real Estate, Utilities and Materials deserve equal attention.
- Always name the concrete sector (e.g. "Automotive", "Biotech", "Cloud Infrastructure").

RULES:
1. Recommend only stocks actually mentioned in or directly tied to the news.
2. If the news is about GM, talk about GM, not NVDA/MSFT.
3. Be contrarian when warranted; not everything is a buy.
4. Explain what the news really means and how an investor should think about it."""


def build_market_context(market: MarketSnapshot | None) -> str:
    """Render the market snapshot as prompt context.

    Args:
        market: Latest market snapshot, or None when unavailable.

    Returns:
        Context block, empty when there is no market data.
    """
    if market is None or market.is_empty:
        return ""

    indices = ", ".join(f"{q.name}: {q.change_percent:.2f}%" for q in market.indices)
    return (
        "Current Market Context:\n"
        f"- Major Indices: {indices}\n"
        f"- Hot Sectors: {', '.join(market.hot_sectors)}\n"
        f"- Underperforming Sectors: {', '.join(market.cold_sectors)}\n"
    )


def build_content(item: Item, transcript: str | None, max_chars: int) -> str:
    """Render the item body: transcript when present, description otherwise."""
    if transcript and transcript.strip():
        text = transcript.strip()
        if len(text) > max_chars:
            text = text[: max_chars - 3] + "..."
        return f"Content (Transcript):\n{text}"

    description = item.description.strip() or "No description available"
    return f"Description: {description}"


def _header(item: Item, market: MarketSnapshot | None, content: str) -> str:
    return f"""{build_market_context(market)}
Video Title: {item.title}
Channel: {item.source}
{content}"""


BRIEF_TASK = """Analyze this financial news video. The client wants to WIDEN their investment perspective.

Answer in Korean:
1. 요약: 핵심 내용을 최대 5줄로 (각 줄 1-2문장)
2. AI의 해석 (최대 5줄): 왜 중요한지, 숨은 의미와 연쇄 효과
3. 투자자 관점 (최대 5줄): 기회와 리스크, 가능한 포지션, 타이밍
4. 섹터 분류: "메인섹터 > 서브섹터" 형식, 테크/AI 편향 금지
5. 관련 종목: 뉴스에 실제로 언급되었거나 직접 관련된 종목만

Return ONLY valid JSON in this schema:
{
  "summary_lines": ["요약1", "요약2", "요약3", "요약4", "요약5"],
  "interpretation": ["해석1", "해석2", "해석3", "해석4", "해석5"],
  "investor_perspective": ["관점1", "관점2", "관점3", "관점4", "관점5"],
  "sector": "메인섹터 > 서브섹터",
  "sector_rationale": "이 섹터로 분류한 이유",
  "tickers": ["뉴스에 언급된 종목 티커"],
  "action": "BUY|SELL|HOLD|WATCH",
  "urgency": "immediate|this_week|monitoring",
  "sentiment": "positive|negative|neutral"
}"""


DETAIL_TASK = """Give a comprehensive analysis of this financial news with the 6W framework,
focused on actionable insight.

Return ONLY valid JSON in Korean following this schema:
{
  "six_w": {
    "who": "관련 기업, 인물, 기관",
    "what": "핵심 이벤트",
    "when": "발생 또는 예정 시점",
    "where": "영향을 받는 시장, 지역, 섹터",
    "why": "배경과 맥락, 왜 중요한가",
    "how": "전개 전망과 시나리오"
  },
  "market_connection": "현재 시장 상황과의 연관성",
  "trade_recommendation": {
    "primary_pick": "최우선 추천 종목 티커",
    "entry_point": "진입 가격대 또는 조건",
    "target_price": "목표가",
    "stop_loss": "손절 라인",
    "position_size": "포트폴리오 대비 비중",
    "time_horizon": "투자 기간"
  },
  "opportunities": ["기회 요인"],
  "risks": ["위험 요인"],
  "action_items": ["구체적 행동"],
  "related_tickers": ["관련 종목"],
  "confidence": "high|medium|low"
}"""


INSIGHT_TASK = """Based on all of today's news, give THE ONE THING that matters most.
The investor is heading out for a morning run and can remember only one thing.
Make it specific, actionable and memorable.

Today's news summaries:
{summaries}

{market_context}
Respond with ONLY one Korean sentence. No JSON, no formatting.
Example: "NVDA 실적 발표 앞두고 AI 반도체 섹터 주목, 장 시작 전 매수 고려\""""


WEEKLY_REVIEW_TASK = """Write this week's performance review for your client.

This week's recommendations:
{recommendations}

Return ONLY valid JSON in Korean following this schema:
{{
  "total_recommendations": 5,
  "winning_trades": 3,
  "losing_trades": 2,
  "win_rate": "60%",
  "total_return": "+5.2%",
  "best_pick": {{"ticker": "NVDA", "return": "+12%"}},
  "worst_pick": {{"ticker": "AMD", "return": "-3%"}},
  "lessons_learned": "이번 주 배운 점",
  "next_week_outlook": "다음 주 전망",
  "key_events_next_week": ["이벤트1", "이벤트2"]
}}"""


def build_brief_prompt(item: Item, content: str, market: MarketSnapshot | None) -> str:
    return f"{_header(item, market, content)}\n\n{BRIEF_TASK}"


def build_detail_prompt(item: Item, content: str, market: MarketSnapshot | None) -> str:
    return f"{_header(item, market, content)}\n\n{DETAIL_TASK}"


def build_insight_prompt(summaries: list[str], market: MarketSnapshot | None) -> str:
    return INSIGHT_TASK.format(
        summaries="\n".join(summaries) or "- (no items)",
        market_context=build_market_context(market),
    )


def build_weekly_review_prompt(lines: list[str]) -> str:
    return WEEKLY_REVIEW_TASK.format(recommendations="\n".join(lines))
