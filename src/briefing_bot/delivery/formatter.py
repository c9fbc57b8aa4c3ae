# src/briefing_bot/delivery/formatter.py
"""Formats briefings into Telegram Markdown messages."""

from collections.abc import Sequence
from datetime import date

from briefing_bot.delivery.models import Button, OutboundMessage
from briefing_bot.models.analysis import (
    UNCLASSIFIED_SECTOR,
    Action,
    Confidence,
    DetailedAnalysis,
    WeeklyReview,
)
from briefing_bot.models.market import Direction, MarketSnapshot
from briefing_bot.models.plan import DeliveryPlan, ProcessedItem, RunKind, RunWindow
from briefing_bot.models.recommendation import Recommendation, RecommendationStatus

SEPARATOR = "━━━━━━━━━━━━━━━━━━"
DETAIL_PREFIX = "detail:"

_MARKDOWN_SPECIAL = ("_", "*", "[", "]", "`")

_SENTIMENT_EMOJI = {"positive": "📈", "negative": "📉"}

_ACTION_LABEL = {
    Action.BUY: "🟢 매수",
    Action.SELL: "🔴 매도",
    Action.HOLD: "🟡 보유",
    Action.WATCH: "👀 관망",
}

_CONFIDENCE_EMOJI = {Confidence.HIGH: "🟢", Confidence.MEDIUM: "🟡"}

_STATUS_EMOJI = {
    RecommendationStatus.WINNING: "🟢",
    RecommendationStatus.LOSING: "🔴",
    RecommendationStatus.TARGET_HIT: "🎯",
    RecommendationStatus.STOPPED_OUT: "⛔",
}


def escape_markdown(text: str | None) -> str:
    """Escape Telegram Markdown control characters in free text."""
    if not text:
        return ""
    text = str(text)
    for char in _MARKDOWN_SPECIAL:
        text = text.replace(char, f"\\{char}")
    return text


def truncate_message(text: str, max_length: int = 4096) -> str:
    """Cut text to max_length characters, ending with '...' when cut."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def format_number(value: float | None) -> str:
    """Round to 2 places, with thousands separators from 1000 up."""
    if value is None:
        return "N/A"
    rounded = round(value, 2)
    if rounded >= 1000:
        return f"{rounded:,}"
    return str(rounded)


def detail_payload(item_id: str) -> str:
    return f"{DETAIL_PREFIX}{item_id}"


class BriefingFormatter:
    """Formats briefing data into readable Telegram messages."""

    def format_market_summary(self, market: MarketSnapshot, briefing_date: date) -> str:
        """Format the opening market-overview message."""
        lines = [
            f"📊 *{briefing_date:%Y.%m.%d} 모닝 브리핑*",
            "",
            "*\\[시장 현황\\]*",
        ]

        for quote in market.indices:
            emoji = "🟢" if quote.direction == Direction.UP else "🔴"
            sign = "+" if quote.change >= 0 else ""
            lines.append(
                f"{emoji} {quote.name}: {format_number(quote.price)} "
                f"({sign}{round(quote.change_percent, 2)}%)"
            )

        if market.hot_sectors:
            lines.append("")
            lines.append(f"🔥 *핫 섹터*: {', '.join(market.hot_sectors)}")
        if market.cold_sectors:
            lines.append(f"❄️ *부진 섹터*: {', '.join(market.cold_sectors)}")

        return "\n".join(lines)

    def format_item(self, processed: ProcessedItem, index: int) -> str:
        """Format one item summary; index is zero-based."""
        item, brief = processed.item, processed.brief
        sentiment_emoji = _SENTIMENT_EMOJI.get(brief.sentiment, "📊")

        lines = [
            "",
            SEPARATOR,
            f"{sentiment_emoji} *{index + 1}. {escape_markdown(item.title)}*",
            f"📺 {escape_markdown(item.source)} | ⏱ {item.duration}",
            "",
        ]

        if brief.sector and brief.sector != UNCLASSIFIED_SECTOR:
            lines.append(f"🏷 *섹터*: {escape_markdown(brief.sector)}")
            lines.append("")

        lines.append("📝 *요약*")
        for i, line in enumerate(brief.summary_lines, start=1):
            lines.append(f"{i}. {escape_markdown(line)}")

        if brief.interpretation:
            lines.append("")
            lines.append("🤖 *AI의 해석*")
            lines.extend(f"• {escape_markdown(line)}" for line in brief.interpretation)

        if brief.investor_perspective:
            lines.append("")
            lines.append("💰 *투자자 관점*")
            lines.extend(f"• {escape_markdown(line)}" for line in brief.investor_perspective)

        if brief.tickers:
            lines.append("")
            lines.append(_ACTION_LABEL.get(brief.action, "📋 분석"))
            lines.append(f"🎯 *관련 종목*: {escape_markdown(', '.join(brief.tickers))}")

        return "\n".join(lines)

    def item_buttons(self, processed: ProcessedItem) -> list[Button]:
        return [
            Button(text="📖 상세 분석 보기", callback_data=detail_payload(processed.item.id)),
            Button(text="🎬 영상 보기", url=processed.item.url),
        ]

    def format_closing(self, insight: str, item_count: int) -> str:
        """Format the closing message with the day's one-line takeaway."""
        return "\n".join(
            [
                SEPARATOR,
                "",
                "🎯 *오늘의 핵심 (런닝 가면서 기억할 것)*",
                "",
                escape_markdown(insight),
                "",
                SEPARATOR,
                "",
                "📌 *브리핑 완료*",
                f"총 {item_count}개 영상 분석",
                "",
                '_각 영상의 "상세 분석 보기" 버튼을 클릭하면_',
                "_6하원칙 분석과 구체적 매매 전략을 확인할 수 있습니다._",
                "",
                "_화이팅! 🏃‍♂️_",
            ]
        )

    def format_update_header(self, window: RunWindow, item_count: int) -> str:
        return (
            f"🔄 *업데이트 브리핑* ({window.label()} KST)\n\n"
            f"새로운 영상 {item_count}개 분석 완료"
        )

    def format_no_items(self, briefing_date: date) -> str:
        return (
            f"📭 {briefing_date:%Y.%m.%d} 모닝 브리핑\n\n"
            "해당 시간대에 새로운 영상이 없습니다."
        )

    def format_failure(self, kind: RunKind, error: Exception | str) -> str:
        """Format the notice sent when a run fails for good."""
        label = "모닝 브리핑" if kind == RunKind.FULL else "업데이트 브리핑"
        return f"⚠️ {label} 생성 중 오류가 발생했습니다.\n\n{error}"

    def format_detail(self, analysis: DetailedAnalysis) -> str:
        """Format a detailed 6W analysis."""
        six_w = analysis.six_w
        lines = [
            "📋 *상세 분석 (6하원칙)*",
            "",
            "👤 *Who (누가)*",
            escape_markdown(six_w.who),
            "",
            "📌 *What (무엇)*",
            escape_markdown(six_w.what),
            "",
            "🕐 *When (언제)*",
            escape_markdown(six_w.when),
            "",
            "🌍 *Where (어디서)*",
            escape_markdown(six_w.where),
            "",
            "❓ *Why (왜)*",
            escape_markdown(six_w.why),
            "",
            "⚙️ *How (어떻게)*",
            escape_markdown(six_w.how),
            "",
            SEPARATOR,
            "",
            "📊 *시장 연관성*",
            escape_markdown(analysis.market_connection),
            "",
        ]

        trade = analysis.trade_recommendation
        if not trade.is_empty:
            lines.append("💹 *매매 전략*")
            for label, value in (
                ("추천 종목", trade.primary_pick),
                ("진입", trade.entry_point),
                ("목표가", trade.target_price),
                ("손절", trade.stop_loss),
                ("비중", trade.position_size),
                ("기간", trade.time_horizon),
            ):
                if value:
                    lines.append(f"• {label}: {escape_markdown(value)}")
            lines.append("")

        for title, entries in (
            ("✅ *기회 요인*", analysis.opportunities),
            ("⚠️ *위험 요인*", analysis.risks),
            ("📝 *고려할 행동*", analysis.action_items),
        ):
            if entries:
                lines.append(title)
                lines.extend(f"• {escape_markdown(entry)}" for entry in entries)
                lines.append("")

        if analysis.related_tickers:
            lines.append(f"🏷 *관련 종목*: {escape_markdown(', '.join(analysis.related_tickers))}")

        emoji = _CONFIDENCE_EMOJI.get(analysis.confidence, "🔴")
        lines.append("")
        lines.append(f"{emoji} 신뢰도: {analysis.confidence.value.upper()}")

        return "\n".join(lines)

    def format_weekly_empty(self) -> str:
        return "📊 *주간 리뷰*\n\n이번 주 추천 종목이 없습니다."

    def format_weekly_review(
        self, recommendations: Sequence[Recommendation], review: WeeklyReview
    ) -> str:
        """Format the weekly performance review."""
        lines = [
            "📊 *주간 성과 리뷰*",
            "",
            SEPARATOR,
            "",
            "📈 *이번 주 추천 종목*",
        ]
        for rec in recommendations:
            emoji = _STATUS_EMOJI.get(rec.status, "⚪")
            lines.append(f"{emoji} {rec.ticker}: {rec.return_display}")

        lines.extend(["", SEPARATOR, ""])

        if review.failed:
            lines.append(f"⚠️ {escape_markdown(review.error)}")
            return "\n".join(lines)

        if review.total_return:
            lines.append(f"💰 *총 수익률*: {review.total_return}")
            lines.append(
                f"📊 *승률*: {review.win_rate} "
                f"({review.winning_trades}/{review.total_recommendations})"
            )

        if review.best_pick:
            lines.append("")
            lines.append(f"🏆 *베스트 픽*: {review.best_pick.ticker} ({review.best_pick.return_pct})")
        if review.worst_pick:
            lines.append(f"📉 *최악의 픽*: {review.worst_pick.ticker} ({review.worst_pick.return_pct})")

        if review.lessons_learned:
            lines.extend(["", "📝 *이번 주 교훈*", escape_markdown(review.lessons_learned)])
        if review.next_week_outlook:
            lines.extend(["", "🔮 *다음 주 전망*", escape_markdown(review.next_week_outlook)])
        if review.key_events_next_week:
            lines.extend(["", "📅 *다음 주 주요 이벤트*"])
            lines.extend(f"• {escape_markdown(event)}" for event in review.key_events_next_week)

        return "\n".join(lines)


def render_plan(plan: DeliveryPlan, formatter: BriefingFormatter) -> list[OutboundMessage]:
    """Render a delivery plan into the ordered list of messages to send.

    Update runs open with a header; every run then gets the market summary,
    one message per item with its two buttons, and a closing message.
    """
    messages: list[OutboundMessage] = []
    if plan.kind == RunKind.UPDATE:
        messages.append(
            OutboundMessage(text=formatter.format_update_header(plan.window, len(plan.items)))
        )

    messages.append(
        OutboundMessage(text=formatter.format_market_summary(plan.market, plan.briefing_date))
    )
    for index, processed in enumerate(plan.items):
        messages.append(
            OutboundMessage(
                text=formatter.format_item(processed, index),
                buttons=formatter.item_buttons(processed),
            )
        )
    messages.append(OutboundMessage(text=formatter.format_closing(plan.insight, len(plan.items))))
    return messages
