"""recruitbotのカスタム例外クラス。"""


class RecruitBotError(Exception):
    """recruitbotの基底例外クラス。"""


class SessionNotFoundError(RecruitBotError):
    """チャットセッションが見つからない場合の例外。"""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Chat session not found: {session_id}")
        self.session_id = session_id


class ApplicationNotFoundError(RecruitBotError):
    """応募データが見つからない場合の例外。"""

    def __init__(self, application_id: str) -> None:
        super().__init__(f"Application not found: {application_id}")
        self.application_id = application_id


class CatalogError(RecruitBotError):
    """チャットカタログの読み込み・検証エラー。"""


class StorageError(RecruitBotError):
    """ストレージ操作のエラー。"""


class ConfigError(RecruitBotError):
    """サーバー設定の不備。"""


class ContactMethodError(RecruitBotError):
    """未対応の連絡手段が指定された場合の例外。"""

    def __init__(self, contact_method: str) -> None:
        super().__init__(f"Unsupported contact method: {contact_method}")
        self.contact_method = contact_method


class InvalidPeriodError(RecruitBotError):
    """集計対象の年月が不正な場合の例外。"""
