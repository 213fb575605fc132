"""HTTP gateway for the policy ledger."""
