# /teacherboard/services/prompt_library.py

"""
Master prompts for the Gemini-backed tools. Prompts are kept here as code,
not scattered through the services that send them.
"""

OFFICIAL_DOCUMENT_PROMPT = """
당신은 15년 경력의 행정공무원으로 행정안전부의 '행정업무 운영편람'을 완벽히 숙지한 공문서 작성 전문가입니다.

다음 정보를 바탕으로 한국 공문서 표준 형식에 맞는 공문을 작성해주세요:

**문서 정보:**
- 제목: {title}
- 수신: {recipient}
- 발신: {sender}
- 주요 내용: {content}
{deadline_line}
{attachments_line}

**작성 지침:**
1. 문서 구조: 두문-본문-결문으로 구성
2. 항목 기호: 1. → 가. → 1) 순서로 2칸 들여쓰기
3. 날짜 표기: YYYY.M.D. 형식 (예: 2024.12.25.)
4. 시간 표기: HH:MM 형식 (예: 14:00)
5. 금액 표기: 원화 + 숫자 + 한글표기 (예: 1,000원(일천원))
6. 5W1H 원칙 준수: 누가, 무엇을, 언제, 어디서, 왜, 어떻게
7. 첨부 및 끝 표시 포함

공문서는 마크다운 형식으로 작성하되, HWP 호환성을 고려해주세요.
현재 날짜는 {today}입니다.
"""


IMAGE_PROMPT_ENHANCEMENT_PROMPT = """
다음 한국어 교육용 이미지 설명을 구체적인 영어 프롬프트로 변환해주세요. 교육용으로 적합하고 명확하게 작성해주세요.

**--- RULES ---**
1. Respond with ONLY a JSON object of the form {{"enhancedPrompt": "<English prompt>"}}.
2. Do not wrap the JSON in markdown backticks.

**--- DESCRIPTION ---**
"{prompt}"
"""


VISION_DEFAULT_PROMPT = "이 이미지를 교사의 수업 준비에 도움이 되도록 자세히 설명해주세요."
