# -*- coding: utf-8 -*-
"""
Fortnight

MultiversX DeFi Agent 层：交易 Agent、情绪分析 Agent、注册中心与链上辅助工具。
"""

__version__ = "0.1.0"
