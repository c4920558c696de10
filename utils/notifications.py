"""
Notifications Module - Admin Telegram notifications
"""

import threading
import requests
from flask import current_app
from markupsafe import escape


def get_admin_telegram_credentials():
    """Admin Telegram credentials from configuration

    Returns:
        tuple: (bot_token, chat_id) or (None, None) if not configured
    """
    bot_token = current_app.config.get('ADMIN_TELEGRAM_BOT_TOKEN')
    chat_id = current_app.config.get('ADMIN_TELEGRAM_CHAT_ID')
    if bot_token and chat_id:
        return bot_token, chat_id
    return None, None


def send_admin_telegram_notification(message_text):
    """
    Send Telegram notification to the site admin on a background thread

    Args:
        message_text (str): HTML message to send

    Returns:
        bool: True if a send was started, False if Telegram is not configured
    """
    bot_token, chat_id = get_admin_telegram_credentials()
    if not (bot_token and chat_id):
        current_app.logger.debug("Admin Telegram credentials not configured")
        return False

    logger = current_app.logger
    url = f"https://api.telegram.org/bot{bot_token}/sendMessage"
    payload = {
        'chat_id': chat_id,
        'text': message_text,
        'parse_mode': 'HTML'
    }

    def _send():
        try:
            response = requests.post(url, json=payload, timeout=10)
            if response.status_code == 200:
                logger.info("Admin Telegram notification sent")
            else:
                logger.error(f"Telegram API error: {response.status_code}")
        except requests.RequestException as e:
            logger.error(f"Telegram notification error: {str(e)}")

    thread = threading.Thread(target=_send)
    thread.daemon = True
    thread.start()
    return True


def notify_new_contact_message(message):
    """Tell the admin about a new contact-form message"""
    body = message['message']
    preview = body[:200] + ('...' if len(body) > 200 else '')
    return send_admin_telegram_notification(
        f"📧 <b>New Portfolio Message</b>\n\n"
        f"👤 <b>From:</b> {escape(message['name'])}\n"
        f"📧 <b>Email:</b> {escape(message['email'])}\n"
        f"💬 <b>Message:</b>\n{escape(preview)}")


__all__ = [
    'get_admin_telegram_credentials',
    'send_admin_telegram_notification',
    'notify_new_contact_message'
]
