from __future__ import annotations

# Defaults for the CLI; SOLANA_RPC / SOLFIND_* env vars (and .env) override them.
PUMPFUN_PROGRAM_ID   = "6EF8rrecthR5Dkzon8Nwu78hRvfCKubJ14M5uBEwF6P"
DEFAULT_RPC_URL      = "https://api.mainnet-beta.solana.com"
DEFAULT_CONCURRENCY  = 20
SIGNATURE_PAGE_LIMIT = 1000
DEFAULT_TIMEOUT_S    = 20
DEFAULT_DAYS         = 7
DEFAULT_OUT          = "transactions.json"
