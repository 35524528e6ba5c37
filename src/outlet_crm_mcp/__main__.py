"""Run the Outlet CRM MCP server: ``python -m outlet_crm_mcp``.

Environment variables control behavior (see ``outlet_crm_mcp.config``):

- MCP_TRANSPORT: 'stdio', 'http' or 'sse' (default: stdio)
- SUPABASE_URL / SUPABASE_SERVICE_KEY: backend connection
- PORT / HOST: listening address for http and sse
- LOG_LEVEL: logging level (default: INFO)
"""

from .main import main

if __name__ == "__main__":
    main()
