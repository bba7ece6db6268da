"""E-mail bodies for alert notifications and address verification."""
from price_alerts.core.utils import format_price
from price_alerts.transport.email import EmailMessage

_STYLE = """
    body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
    .container { max-width: 600px; margin: 0 auto; padding: 20px; }
    .header { background: #2563eb; color: white; padding: 20px; text-align: center; }
    .content { padding: 20px; background: #f9f9f9; }
    .price-box { background: white; padding: 15px; margin: 15px 0; border-radius: 8px; }
    .button { display: inline-block; background: #2563eb; color: white; padding: 12px 24px;
              text-decoration: none; border-radius: 4px; margin-top: 15px; }
    .footer { text-align: center; padding: 20px; color: #666; font-size: 12px; }
"""


def _html(title: str, body: str, footer: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head><style>{_STYLE}</style></head>
<body>
  <div class="container">
    <div class="header"><h1>{title}</h1></div>
    <div class="content">{body}</div>
    <div class="footer"><p>{footer}</p></div>
  </div>
</body>
</html>
"""


def price_alert_triggered(
    product_name: str,
    current_price: int,
    target_price: int,
    currency: str,
    manage_url: str | None = None,
) -> EmailMessage:
    current = format_price(current_price, currency)
    target = format_price(target_price, currency)
    footer = "You are receiving this because you set up a price alert."

    body = (
        f"<h2>{product_name}</h2>"
        f'<div class="price-box"><p>Current price: <strong>{current}</strong></p>'
        f"<p>Your target price: {target}</p></div>"
    )
    text = f"Price alert: {product_name}\n\nCurrent price: {current}\nYour target price: {target}\n"
    if manage_url:
        body += f'<a href="{manage_url}" class="button">Manage alert</a>'
        text += f"\nManage this alert: {manage_url}\n"
    text += f"\n---\n{footer}\n"

    return EmailMessage(
        subject=f"Price alert: {product_name} is now {current}",
        text=text,
        html=_html("Price Alert", body, footer),
    )


def anonymous_verification(
    product_name: str,
    target_price: int,
    currency: str,
    verify_url: str,
    manage_url: str,
    ttl_hours: int,
) -> EmailMessage:
    target = format_price(target_price, currency)
    footer = f"Unverified alerts are removed after {ttl_hours} hours."
    body = (
        f"<p>Confirm your price alert for <strong>{product_name}</strong> "
        f"at {target}.</p>"
        f'<a href="{verify_url}" class="button">Confirm alert</a>'
        f'<p>Manage it any time: <a href="{manage_url}">{manage_url}</a></p>'
    )
    text = (
        f"Confirm your price alert for {product_name} at {target}.\n\n"
        f"Confirm: {verify_url}\n"
        f"Manage: {manage_url}\n\n---\n{footer}\n"
    )
    return EmailMessage(
        subject=f"Confirm your price alert for {product_name}",
        text=text,
        html=_html("Confirm your price alert", body, footer),
    )


def anonymous_management_link(
    product_name: str,
    target_price: int,
    currency: str,
    manage_url: str,
) -> EmailMessage:
    target = format_price(target_price, currency)
    footer = "Keep this link private: anyone holding it can change or delete the alert."
    body = (
        f"<p>Your price alert for <strong>{product_name}</strong> at {target}.</p>"
        f'<a href="{manage_url}" class="button">Manage alert</a>'
    )
    text = (
        f"Your price alert for {product_name} at {target}.\n\n"
        f"Manage: {manage_url}\n\n---\n{footer}\n"
    )
    return EmailMessage(
        subject=f"Manage your price alert for {product_name}",
        text=text,
        html=_html("Manage your price alert", body, footer),
    )
