from typing import Sequence

from sklearn.feature_extraction.text import TfidfVectorizer

from analysis.domain.analysis_record import MAX_KEYWORDS

MIN_KEYWORD_LENGTH = 3


def extract_keywords(texts: Sequence[str], limit: int = MAX_KEYWORDS) -> list[str]:
    """
    댓글 전체로 TF-IDF 행렬을 만들고, 첫 번째 댓글(row 0)의 점수 순으로 키워드를 고른다.
    - 2글자 이하 용어는 제외하고 최대 limit개까지, 처음 등장한 순서를 유지하며 중복을 제거한다.
    - 입력이 비어 있거나 어휘가 하나도 없으면 빈 리스트를 반환한다.
    """
    documents = [text for text in texts if isinstance(text, str)]
    if not documents:
        return []

    vectorizer = TfidfVectorizer(lowercase=True, stop_words="english")
    try:
        matrix = vectorizer.fit_transform(documents)
    except ValueError:
        # empty vocabulary
        return []

    terms = vectorizer.get_feature_names_out()
    row = matrix[0].tocoo()
    scored = sorted(zip(row.col, row.data), key=lambda item: (-item[1], terms[item[0]]))

    ranked = [str(terms[index]) for index, _ in scored]
    filtered = [term for term in ranked if len(term) >= MIN_KEYWORD_LENGTH][:limit]
    return list(dict.fromkeys(filtered))
