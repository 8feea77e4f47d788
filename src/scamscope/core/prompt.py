"""Classification prompt builder (core domain)."""

from __future__ import annotations

OUTPUT_FORMAT = "LEVEL|PERCENTAGE|EXPLANATION"

_TEMPLATE = """You are an AI assistant specializing in detecting scams and fraudulent messages.
Analyze the following message and provide:
1. One of three levels: 'SAFE', 'POTENTIAL_SCAM', or 'HIGHLY_LIKELY_SCAM'
2. A percentage (0-100) indicating confidence that this is a scam
3. A brief explanation

Use these percentage guidelines:
- SAFE: 0-25% (very low scam confidence)
- POTENTIAL_SCAM: 25-50% (moderate suspicion but not conclusive)
- HIGHLY_LIKELY_SCAM: 50-100% (high confidence it's a scam)

COMMON SCAM INDICATORS TO WATCH FOR:
- Messages claiming someone sent photos/videos without context
- Urgent requests for personal information, passwords, or money
- Suspicious links or requests to "check something out"
- Fake prize notifications or lottery winnings
- Impersonation of friends/family asking for help
- Phishing attempts disguised as legitimate services
- Messages creating false urgency or fear
- Requests to verify accounts or update information
- Too-good-to-be-true offers

Format your response exactly like this:
{output_format}

Examples:
SAFE|8|This appears to be a normal conversation with no suspicious elements.
POTENTIAL_SCAM|35|The message creates urgency and asks for personal information, which are common scam tactics.
HIGHLY_LIKELY_SCAM|75|Classic social engineering attempt - claiming someone sent a photo is a common phishing tactic to get clicks.

Message to analyze: "{message}\""""


def build_prompt(message_text: str) -> str:
    """Embed the message verbatim into the fixed classification template.

    No escaping is applied; the model is trusted to treat the message as data.
    """

    return _TEMPLATE.format(output_format=OUTPUT_FORMAT, message=message_text)
