#!/usr/bin/env python3
"""Simple script to run the application."""
import uvicorn

if __name__ == "__main__":
    print("=" * 60)
    print("Starting Portfolio Proxy API")
    print("=" * 60)
    print("\nEndpoints:")
    print("  POST /api/chatbot/message")
    print("  GET  /api/weather, /api/weather/coordinates")
    print("  GET  /api/stock/quote, /api/stock/historical")
    print("  GET  /api/sports/{mlb|nfl|nhl|nba}")
    print("  GET  /api/discord/{serverId}")
    print("\nServer will start at: http://localhost:8000")
    print("API docs available at: http://localhost:8000/docs")
    print("=" * 60)
    print()

    uvicorn.run(
        "portfolio_proxy.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
