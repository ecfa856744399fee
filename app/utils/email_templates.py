import html


def create_welcome_email_template(name: str, client_url: str) -> str:
    """HTML body of the welcome email sent right after signup."""
    first_name = html.escape((name or "").split(" ")[0] or "there")
    client_url = html.escape(client_url, quote=True)

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>Welcome to LetsChat</title>
</head>
<body style="margin:0;padding:0;background:#f4f4f7;font-family:Arial,Helvetica,sans-serif;">
  <table role="presentation" width="100%" cellspacing="0" cellpadding="0">
    <tr>
      <td align="center" style="padding:32px 16px;">
        <table role="presentation" width="600" style="max-width:600px;background:#ffffff;border-radius:12px;">
          <tr>
            <td style="padding:32px;">
              <h1 style="margin:0 0 16px;color:#1f2937;">Hi {first_name}, welcome to LetsChat!</h1>
              <p style="color:#4b5563;line-height:1.6;">
                Finish your profile to tell us which language you speak and which one
                you are learning. We will then suggest language partners you can send
                friend requests to.
              </p>
              <p style="text-align:center;margin:32px 0;">
                <a href="{client_url}/onboarding"
                   style="background:#10b981;color:#ffffff;padding:12px 24px;border-radius:8px;text-decoration:none;">
                  Complete your profile
                </a>
              </p>
              <p style="color:#9ca3af;font-size:12px;">You are receiving this email because you signed up for LetsChat.</p>
            </td>
          </tr>
        </table>
      </td>
    </tr>
  </table>
</body>
</html>
"""
