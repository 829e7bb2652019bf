# app/services/mail_service.py
# 메일 발송
# - console: 로그로만 출력 (로컬/테스트용)
# - smtp: .env 의 MAIL_* 설정으로 실제 발송
# 실패 시 예외를 그대로 올린다. 호출한 서비스가 InternalError 로 바꿔서 작업 전체를 실패 처리함.
import logging
import smtplib
from email.message import EmailMessage

from app.config import settings

logger = logging.getLogger(__name__)


def _send_smtp(to: str, subject: str, text: str) -> None:
    if not settings.mail_host:
        raise RuntimeError("MAIL_HOST 환경변수가 설정되어 있지 않습니다.")

    msg = EmailMessage()
    msg["From"] = settings.mail_from or settings.mail_user
    msg["To"] = to
    msg["Subject"] = subject
    msg.set_content(text)

    # 465 는 SSL, 그 외는 STARTTLS
    if settings.mail_port == 465:
        server = smtplib.SMTP_SSL(settings.mail_host, settings.mail_port, timeout=10)
    else:
        server = smtplib.SMTP(settings.mail_host, settings.mail_port, timeout=10)
    with server:
        if settings.mail_port != 465:
            server.starttls()
        if settings.mail_user and settings.mail_password:
            server.login(settings.mail_user, settings.mail_password)
        server.send_message(msg)


def send_mail(to: str, subject: str, text: str) -> None:
    if settings.mail_backend == "smtp":
        _send_smtp(to, subject, text)
        logger.info("[MAIL] sent to=%s subject=%r", to, subject)
        return

    # console 모드
    logger.info("[MAIL] to=%s subject=%r\n%s", to, subject, text)


# ---- 메일 본문 템플릿 ----

def send_verification_code(to: str, code: int) -> None:
    send_mail(to, "Email Verification", f"Your verification code is: {code}")

def send_reset_code(to: str, code: int) -> None:
    send_mail(
        to,
        "Password Reset Verification",
        f"Your password reset verification code is: {code}",
    )

def send_project_invite(to: str, project_name: str, accept_url: str) -> None:
    send_mail(
        to,
        f"Invitation to project: {project_name}",
        f"You have been invited to join the project \"{project_name}\".\n\n"
        f"Accept the invitation: {accept_url}",
    )

def send_task_assigned(to: str, first_name: str | None, task_name: str, project_name: str) -> None:
    text = (
        f"Hello {first_name or to},\n\n"
        f"You have been assigned a new task in the project \"{project_name}\".\n\n"
        f"Task Details:\n- Task: {task_name}\n- Project: {project_name}\n\n"
        "Please check your tasks and start working on it.\n\n"
        "Best regards,\nYour Team"
    )
    send_mail(to, f"Task Assigned: {task_name}", text)
