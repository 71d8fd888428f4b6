"""
g2p_kor 예외 클래스 모음.

복구 가능한 실패(미등록 문자, 미등록 심볼, 이름 테이블 누락)는 예외가 아니라
fallback 값으로 처리한다. 여기 정의된 예외는 호출을 중단해야 하는 경우에만 쓴다.
"""


class G2pError(Exception):
    """g2p_kor 기본 예외 클래스"""
    pass


class ConfigurationError(G2pError):
    """설정 오류 (미등록 언어 코드, 잘못된 모델 설정 등)"""
    pass


class AlignmentError(G2pError):
    """word2ph 와 음소 시퀀스 길이 불일치"""
    pass


class InvalidJamoError(G2pError, ValueError):
    """
    자모 분류/조합 실패.

    엄격 모드 API(`jamo_to_hangul`, `get_jamo_class`)에서만 발생한다.
    """

    def __init__(self, message: str, jamo: str = ""):
        super().__init__(message)
        self.jamo = jamo

    def __str__(self) -> str:
        message = super().__str__()
        if self.jamo:
            return f"{message} (U+{ord(self.jamo[0]):04X})"
        return message
