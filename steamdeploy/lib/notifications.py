"""Notification service for sending Steam deploy results to Slack and Discord.

Webhooks are configured via SLACK_WEBHOOK_URL and DISCORD_WEBHOOK_URL and
carried on SteamConfig. A failing webhook is reported on stdout and never
fails the deploy itself.
"""

import requests
from typing import Optional, Dict, Any, List
from datetime import datetime, timezone
from .config import SteamConfig


class NotificationService:
    """Send notifications to Slack and Discord webhooks."""

    def __init__(self, config: SteamConfig):
        self.slack_webhook = config.slack_webhook
        self.discord_webhook = config.discord_webhook

    @property
    def enabled(self) -> bool:
        return bool(self.slack_webhook or self.discord_webhook)

    def send_deploy_notification(self, result: Dict[str, Any], status: str, error: Optional[str] = None) -> None:
        """Send notification about a deploy to all configured services.

        Args:
            result: Deploy details (task, app_manifest, build_id, startedAt, completedAt)
            status: Either 'completed' or 'failed'
            error: Optional error message if the deploy failed
        """
        if not self.enabled:
            return

        print(f"Sending {status} notification for {result.get('app_manifest', 'unknown manifest')}")

        if self.discord_webhook:
            self._send_discord_notification(result, status, error)

        if self.slack_webhook:
            self._send_slack_notification(result, status, error)

    def _format_duration(self, start: str, end: str) -> str:
        """Format the time between two ISO 8601 timestamps, e.g. "2m 5s".

        Returns "N/A" if either timestamp cannot be parsed.
        """
        try:
            start_dt = datetime.fromisoformat(start.replace('Z', '+00:00'))
            end_dt = datetime.fromisoformat(end.replace('Z', '+00:00'))
        except ValueError:
            return "N/A"

        total = int((end_dt - start_dt).total_seconds())
        hours, remainder = divmod(total, 3600)
        minutes, seconds = divmod(remainder, 60)

        if hours > 0:
            return f"{hours}h {minutes}m {seconds}s"
        elif minutes > 0:
            return f"{minutes}m {seconds}s"
        return f"{seconds}s"

    def _fields(self, result: Dict[str, Any], error: Optional[str]) -> List[Dict[str, Any]]:
        """Collect (name, value, inline) triples shared by both webhook formats."""
        fields = [
            {'name': 'Task', 'value': result.get('task', 'deploy-build'), 'inline': True},
            {'name': 'Manifest', 'value': result.get('app_manifest', 'N/A'), 'inline': False},
        ]
        if result.get('build_id'):
            fields.append({'name': 'Build ID', 'value': str(result['build_id']), 'inline': True})
        if result.get('startedAt') and result.get('completedAt'):
            fields.append({
                'name': 'Upload Time',
                'value': self._format_duration(result['startedAt'], result['completedAt']),
                'inline': True
            })
        if error:
            fields.append({'name': 'Error', 'value': error, 'inline': False})
        return fields

    def _title(self, status: str) -> str:
        return f"Steam Deploy {status.title()}"

    def _send_discord_notification(self, result: Dict[str, Any], status: str, error: Optional[str] = None) -> None:
        """Send a rich embed to the Discord webhook, green on success and red on failure."""
        color = 3381519 if status == 'completed' else 13632211  # 0x33A64F : 0xD32F2F
        fields = [
            {'name': f['name'], 'value': f"`{f['value']}`" if f['name'] == 'Build ID' else f['value'], 'inline': f['inline']}
            for f in self._fields(result, error)
        ]
        message = {
            'content': self._title(status),
            'embeds': [
                {
                    'title': self._title(status),
                    'color': color,
                    'fields': fields,
                    'timestamp': result.get('completedAt', datetime.now(timezone.utc).isoformat())
                }
            ]
        }
        self._post(self.discord_webhook, message, "Discord")

    def _send_slack_notification(self, result: Dict[str, Any], status: str, error: Optional[str] = None) -> None:
        """Send a colored attachment to the Slack webhook."""
        color = '#36a64f' if status == 'completed' else '#d32f2f'  # Green : Red
        fields = [
            {'title': f['name'], 'value': f['value'], 'short': f['inline']}
            for f in self._fields(result, error)
        ]
        message = {
            'attachments': [
                {
                    'color': color,
                    'title': self._title(status),
                    'fields': fields,
                    'ts': int(datetime.now(timezone.utc).timestamp())
                }
            ]
        }
        self._post(self.slack_webhook, message, "Slack")

    def _post(self, url: str, message: Dict[str, Any], service: str) -> None:
        try:
            response = requests.post(url, json=message, timeout=10)
        except requests.RequestException as e:
            print(f"Error sending {service} notification: {str(e)}")
            return

        if response.status_code >= 400:
            print(f"{service} webhook error: {response.status_code} - {response.text}")
        else:
            print(f"{service} notification sent successfully")
