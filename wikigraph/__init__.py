"""
위키 지식 그래프 탐색 시스템

DokuWiki 문서의 내부 링크와 태그를 추출하여 탐색 가능한
노드/엣지 그래프로 변환합니다.

주요 구성:
- extractor: 마크업 링크·태그 추출 및 식별자 해석
- source: DokuWiki XML-RPC 문서 소스
- lookup: TTL 캐시 기반 추출 서비스
- explorer: 클라이언트 그래프 상태 머신 (확장, 트레이스백, 배치)
- api: JSON 조회 API (FastAPI)
"""

__version__ = "1.0.0"
