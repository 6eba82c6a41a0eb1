from mcp.server.fastmcp import FastMCP
from kube_render_mcp_server.tools.cells import format_memory, format_cpu, format_quantity, format_labels, format_selector, format_age, fit_cell
from kube_render_mcp_server.tools.pods import render_pod_table

# Initialize the FastMCP server
mcp = FastMCP("Kube Render Tools")

# Register tools
mcp.tool()(format_memory)
mcp.tool()(format_cpu)
mcp.tool()(format_quantity)
mcp.tool()(format_labels)
mcp.tool()(format_selector)
mcp.tool()(format_age)
mcp.tool()(fit_cell)
mcp.tool()(render_pod_table)

def main():
    """Main entry point for the server."""
    mcp.run()

if __name__ == "__main__":
    main()
