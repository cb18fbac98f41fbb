# src/deadline_notifier/notifications/templates.py

"""HTML email bodies and subjects for deadline notifications."""

from __future__ import annotations

from html import escape


def deadline_reminder_subject(task_title: str) -> str:
    return f'Reminder: Task "{task_title}" due soon'


def task_overdue_subject(task_title: str) -> str:
    return f'URGENT: Task "{task_title}" is Overdue'


def deadline_reminder(task_title: str, hours_left: int, *, frontend_url: str) -> str:
    return f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
      <h2 style="color: #ef4444;">Task Deadline Reminder</h2>
      <p>Hi there,</p>
      <p>This is a reminder that your task is due soon:</p>
      <div style="background: #fef2f2; padding: 15px; border-radius: 8px; margin: 20px 0; border-left: 4px solid #ef4444;">
        <h3 style="margin: 0 0 10px 0; color: #991b1b;">{escape(task_title)}</h3>
        <p style="margin: 0; color: #7f1d1d; font-weight: bold;">Due in {int(hours_left)} hours</p>
      </div>
      <p>Please complete the task before the deadline.</p>
      <a href="{escape(frontend_url)}/dashboard" style="display: inline-block; background: #ef4444; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px; margin-top: 10px;">View Task</a>
    </div>
    """


def task_overdue(task_title: str, days_overdue: int, *, frontend_url: str) -> str:
    return f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
      <h2 style="color: #dc2626;">Task Overdue Alert</h2>
      <p>Hi there,</p>
      <p><strong>URGENT:</strong> Your task has passed its deadline and is now overdue!</p>
      <div style="background: #fee2e2; padding: 15px; border-radius: 8px; margin: 20px 0; border-left: 4px solid #dc2626;">
        <h3 style="margin: 0 0 10px 0; color: #991b1b;">{escape(task_title)}</h3>
        <p style="margin: 0; color: #7f1d1d; font-weight: bold;">Overdue by {int(days_overdue)} day(s)</p>
      </div>
      <p>Please complete this task as soon as possible or update its status.</p>
      <a href="{escape(frontend_url)}/dashboard" style="display: inline-block; background: #dc2626; color: white; padding: 12px 24px; text-decoration: none; border-radius: 6px; margin-top: 10px;">Complete Task Now</a>
    </div>
    """


def smtp_check_email(app_name: str, sent_at: str) -> str:
    return f"""
    <html>
    <body>
        <h2>{escape(app_name)} test email</h2>
        <p>If you receive this, your SMTP configuration is working correctly.</p>
        <hr>
        <p style="color: #666; font-size: 12px;">Sent at {escape(sent_at)}</p>
    </body>
    </html>
    """
