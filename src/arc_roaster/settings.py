from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

    arc_rpc_url: str = Field(default='https://rpc.testnet.arc.network', alias='ARC_RPC_URL')
    arc_chain_id: int = Field(default=5042002, alias='ARC_CHAIN_ID')
    arc_usdc_address: str = Field(
        default='0x3600000000000000000000000000000000000000', alias='ARC_USDC_ADDRESS'
    )
    arc_usdc_decimals: int = Field(default=6, alias='ARC_USDC_DECIMALS')
    arc_explorer_api_url: str = Field(
        default='https://testnet.arcscan.app/api', alias='ARC_EXPLORER_API_URL'
    )
    arc_recent_tx_limit: int = Field(default=5, ge=1, le=5, alias='ARC_RECENT_TX_LIMIT')
    rpc_timeout_seconds: float = Field(default=12, alias='RPC_TIMEOUT_SECONDS')
    explorer_timeout_seconds: float = Field(default=8, alias='EXPLORER_TIMEOUT_SECONDS')
    llm_timeout_seconds: float = Field(default=30, alias='LLM_TIMEOUT_SECONDS')

    llm_provider: Literal['anthropic', 'bedrock'] = Field(default='anthropic', alias='LLM_PROVIDER')
    anthropic_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices('ANTHROPIC_API_KEY', 'CLAUDE_API_KEY'),
    )
    anthropic_api_url: str = Field(default='https://api.anthropic.com', alias='ANTHROPIC_API_URL')
    anthropic_version: str = Field(default='2023-06-01', alias='ANTHROPIC_VERSION')
    anthropic_model: str = Field(default='claude-sonnet-4-5-20250929', alias='ANTHROPIC_MODEL')
    anthropic_max_tokens: int = Field(default=1024, alias='ANTHROPIC_MAX_TOKENS')
    aws_region: str = Field(default='us-west-2', alias='AWS_REGION')
    aws_access_key_id: str | None = Field(default=None, alias='AWS_ACCESS_KEY_ID')
    aws_secret_access_key: str | None = Field(default=None, alias='AWS_SECRET_ACCESS_KEY')
    aws_session_token: str | None = Field(default=None, alias='AWS_SESSION_TOKEN')
    bedrock_model_id: str = Field(
        default='anthropic.claude-sonnet-4-5-20250929-v1:0', alias='BEDROCK_MODEL_ID'
    )

    log_level: str = Field(default='INFO', alias='LOG_LEVEL')
    dd_api_key: str | None = Field(default=None, alias='DD_API_KEY')
    dd_service: str = Field(default='arc-roaster', alias='DD_SERVICE')
    dd_env: str = Field(default='dev', alias='DD_ENV')
    dd_version: str = Field(default='0.1.0', alias='DD_VERSION')
    dd_site: str = Field(default='datadoghq.com', alias='DD_SITE')
    dd_send_logs: bool = Field(default=True, alias='DD_SEND_LOGS')
    dd_trace_enabled: bool = Field(default=False, alias='DD_TRACE_ENABLED')
    dd_trace_agent_url: str | None = Field(default=None, alias='DD_TRACE_AGENT_URL')


settings = Settings()
