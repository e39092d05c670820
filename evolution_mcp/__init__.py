"""
描述: Evolution API MCP 网关
主要功能:
    - 将 Evolution WhatsApp REST API 暴露为一组 MCP 工具
"""

SERVER_NAME = "evolution-api-tools-server"
__version__ = "1.1.0"
