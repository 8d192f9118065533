"""Canned assistant replies.

These texts are returned verbatim by the conversational rules and by the chat layer when the
interpreter finds no matching rule.
"""

from __future__ import annotations

WELCOME = (
    "👋 Hi! I'm your margin calculation assistant.\n\n"
    "I can help you with:\n"
    "• Margin, markup, pricing calculations\n"
    "• Currency conversions (USD ↔ CAD)\n"
    "• Percentage & math (30% of 130)\n"
    "• Profit, discount, tax, ROI\n"
    "• Tips, interest, averages\n"
    "• And much more!\n\n"
    'Just ask naturally or type "help" for examples! 😊'
)

GREETING = "👋 Hey there! I'm your margin calculation assistant. How can I help you today?"

HOW_ARE_YOU = (
    "I'm doing great, thanks for asking! 😊 Ready to help with calculations. "
    "What would you like to calculate?"
)

THANKS = "You're welcome! 😊 Let me know if you need anything else!"

FAREWELL = "Goodbye! 👋 Come back anytime you need help with calculations!"

IDENTITY = (
    "I'm your AI margin calculation assistant! 🤖 I can help you with:\n"
    "• Margin calculations\n"
    "• Markup conversions\n"
    "• Pricing formulas\n"
    "• Currency conversions\n"
    "• Percentage calculations\n"
    "• And much more!\n\n"
    "Just ask me anything!"
)

HELP = (
    "🆘 **Here's what I can do:**\n\n"
    "**Calculations:**\n"
    '• "30% of 130" - Percentage\n'
    '• "Calculate margin with cost 50 and price 100"\n'
    '• "What price for cost 60 and margin 40%?"\n'
    '• "Convert 50% markup to margin"\n'
    '• "Cost 10 freight 2 duties 1, margin 40%"\n\n'
    "**Currency:**\n"
    '• "Convert 100 USD to CAD"\n'
    '• "Set rate 1.40" - Override exchange rate\n\n'
    "**Math:**\n"
    '• "What is 25 + 75?"\n'
    '• "150 - 30"\n'
    '• "12 × 8" or "12 * 8"\n'
    '• "100 / 4"\n\n'
    "Just type your question naturally!"
)

FALLBACK_HELP = (
    "I can help with many calculations! Try:\n\n"
    "**Percentages & Math:**\n"
    '• "30% of 130"\n'
    '• "What is 25 + 75?"\n'
    '• "150 - 30"\n'
    '• "12 × 8"\n\n'
    "**Margin & Pricing:**\n"
    '• "Margin with cost 50 and price 100"\n'
    '• "Price for cost 60, margin 40%"\n'
    '• "Convert 50% markup to margin"\n\n'
    "**Business:**\n"
    '• "Profit from price 100, cost 60"\n'
    '• "20% discount on 150"\n'
    '• "15% tip on 50"\n'
    '• "ROI: gain 1200, cost 1000"\n\n'
    "**Currency:**\n"
    '• "100 USD to CAD"\n\n'
    "Type 'help' for more examples!"
)
