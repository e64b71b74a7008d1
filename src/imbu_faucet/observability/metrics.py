"""Prometheus metrics for the faucet.

Metrics:
- imbu_faucet_requests_total: Counter of chat commands by command and outcome
- imbu_faucet_tokens_distributed_total: Counter of tokens submitted for transfer
- imbu_faucet_submissions_total: Counter of extrinsics accepted by the node
- imbu_faucet_request_duration_seconds: Histogram of command handling duration
- imbu_faucet_ledger_call_duration_seconds: Histogram of node round trips
"""

from prometheus_client import Counter, Histogram

# Counters
REQUESTS = Counter(
    "imbu_faucet_requests_total",
    "Total number of chat commands handled",
    ["command", "status"],
)

TOKENS_DISTRIBUTED = Counter(
    "imbu_faucet_tokens_distributed_total",
    "Total tokens submitted for transfer",
    ["token"],
)

SUBMISSIONS = Counter(
    "imbu_faucet_submissions_total",
    "Total extrinsics accepted into the node's pending pool",
    ["operation"],
)

# Histograms
REQUEST_DURATION = Histogram(
    "imbu_faucet_request_duration_seconds",
    "Command processing duration",
    ["command"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

LEDGER_CALL_DURATION = Histogram(
    "imbu_faucet_ledger_call_duration_seconds",
    "Ledger node call duration",
    ["operation"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)
