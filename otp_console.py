#!/usr/bin/env python3
import os
import time
from datetime import datetime

from rich.console import Console
from rich.table import Table

from realm_otp.totp import (
    current_counter, generate_otpauth_url, generate_secret,
    generate_token, seconds_remaining,
)

OTP_SECRET = os.getenv("OTP_SECRET")
OTP_ACCOUNT = os.getenv("OTP_ACCOUNT", "user@example.com")
OTP_ISSUER = os.getenv("TOTP_ISSUER", "God's Realm")
STEP_SECONDS = int(os.getenv("TOTP_STEP_SECONDS", "30"))
DIGITS = int(os.getenv("TOTP_DIGITS", "6"))

console = Console()

def read_code(secret, now=None):
    now = time.time() if now is None else now
    counter = current_counter(STEP_SECONDS, now)
    return {
        "timestamp": datetime.fromtimestamp(now),
        "counter": counter,
        "code": generate_token(secret, counter, DIGITS),
        "remaining": seconds_remaining(STEP_SECONDS, now),
    }

def display_table(data):
    table = Table(title=f"{OTP_ISSUER} one-time code")
    for c in ["Time", "Account", "Counter", "Code", "Expires in"]:
        table.add_column(c)
    table.add_row(
        data["timestamp"].strftime("%H:%M:%S"),
        OTP_ACCOUNT, str(data["counter"]),
        f"[bold green]{data['code']}[/bold green]",
        f"{data['remaining']}s"
    )
    console.clear(); console.print(table)

def main():
    secret = OTP_SECRET
    if not secret:
        secret = generate_secret()
        console.print(f"[bold yellow]Generated secret:[/bold yellow] {secret}")
    console.print(f"[cyan]{generate_otpauth_url(secret, OTP_ACCOUNT, OTP_ISSUER)}[/cyan]")
    time.sleep(2)
    try:
        while True:
            display_table(read_code(secret))
            time.sleep(1)
    except KeyboardInterrupt:
        console.print("[red]Stopped by user.[/red]")

if __name__ == "__main__":
    main()
