from . import market_data  # noqa: F401  registers the market data tool
from .registry import (
    TOOL_INDEX,
    auto_register_tool,
    execute_tool,
    get_tool,
    list_tool_specs,
    register_tool,
)
