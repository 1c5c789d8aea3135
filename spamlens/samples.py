"""
Sample messages used to seed an empty email store for demos.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from spamlens.store import EmailRecord


def _ago(**delta) -> str:
    return (datetime.now(timezone.utc) - timedelta(**delta)).isoformat()


def sample_emails() -> list[EmailRecord]:
    spam = [
        EmailRecord(
            id="1",
            subject="CONGRATULATIONS! You have WON a FREE iPhone!",
            sender_name="Prize Department",
            sender_email="prizes@winnersdraw.com",
            recipient="user@example.com",
            content=(
                "Congratulations! You have been selected as our lucky winner for a "
                "brand new iPhone 14 Pro! Click here to claim your FREE prize now! "
                "Limited time offer! Don't miss out on this exclusive deal!"
            ),
            date=_ago(hours=2),
            is_spam=True,
            spam_score=85,
            folder="spam",
        ),
        EmailRecord(
            id="2",
            subject="URGENT: Your Account Will Be Suspended",
            sender_name="Account Service",
            sender_email="security@accounts-verify.com",
            recipient="user@example.com",
            content=(
                "FINAL NOTICE: Your account has been flagged for suspicious activity. "
                "Immediate action required! Verify your account details now to prevent "
                "suspension. Click the link below to confirm your identity."
            ),
            date=_ago(hours=5),
            is_spam=True,
            spam_score=92,
            folder="spam",
        ),
        EmailRecord(
            id="3",
            subject="Make Money Fast - Work From Home!",
            sender_name="Business Opportunity",
            sender_email="wealth@richquick.net",
            recipient="user@example.com",
            content=(
                "Exclusive opportunity! Make $5000 weekly working from home! No risk, "
                "guaranteed success. This miracle system has helped thousands get rich "
                "quick. Limited spots available - act now!"
            ),
            date=_ago(days=1),
            is_read=True,
            is_spam=True,
            spam_score=78,
            folder="spam",
            has_attachment=True,
            attachment_type="image",
            attachment_url="/placeholder.svg",
        ),
    ]

    regular = [
        EmailRecord(
            id="4",
            subject="Team Meeting - Thursday 3PM",
            sender_name="Sarah Johnson",
            sender_email="sarah.j@company.com",
            recipient="user@example.com",
            content=(
                "Hi team, Just a reminder that we have our weekly status meeting this "
                "Thursday at 3PM in Conference Room B. Please come prepared with your "
                "project updates. Thanks!"
            ),
            date=_ago(minutes=30),
            spam_score=2,
        ),
        EmailRecord(
            id="5",
            subject="Your Order #45692 Has Shipped",
            sender_name="Shop Express",
            sender_email="orders@shopexpress.com",
            recipient="user@example.com",
            content=(
                "Thank you for your purchase! Your order #45692 has shipped and is "
                "expected to arrive within 3-5 business days. You can track your package "
                "using the following tracking number: TRK928374655."
            ),
            date=_ago(hours=8),
            is_read=True,
            spam_score=5,
        ),
        EmailRecord(
            id="6",
            subject="Invitation: Alex's Birthday Party",
            sender_name="Alex Chen",
            sender_email="alex.c@friends.com",
            recipient="user@example.com",
            content=(
                "Hey! I'm having a small birthday gathering next Saturday at my place, "
                "starting around 7PM. Would love to have you join us for some food, "
                "drinks and games. Let me know if you can make it!"
            ),
            date=_ago(hours=28),
            is_read=True,
            spam_score=1,
            has_attachment=True,
            attachment_type="image",
            attachment_url="/placeholder.svg",
        ),
        EmailRecord(
            id="7",
            subject="Quarterly Report - Q3 2023",
            sender_name="Finance Department",
            sender_email="finance@company.com",
            recipient="user@example.com",
            content=(
                "Dear all, Attached is the Q3 2023 quarterly report for your review. "
                "We'll be discussing these results during the all-hands meeting next "
                "Monday. Please review the document before then."
            ),
            date=_ago(days=2),
            spam_score=3,
            has_attachment=True,
            attachment_type="document",
            attachment_url="/placeholder.svg",
        ),
    ]

    return regular + spam
