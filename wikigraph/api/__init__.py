"""위키 그래프 HTTP API 패키지"""
