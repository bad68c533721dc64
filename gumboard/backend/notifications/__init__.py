"""
Outbound webhook notifications (Slack, Discord).

Each provider formats board events into its own payload shape; the
dispatcher applies the delivery policy and hands payloads to the sender.
"""
