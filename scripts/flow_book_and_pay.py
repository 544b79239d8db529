#!/usr/bin/env python3
"""
Complete booking and payment flow against a running API.

DO NOT ADD BUSINESS LOGIC HERE.
This script only orchestrates API calls.
All rules live in the backend.

Usage:
    python scripts/flow_book_and_pay.py --stall-id <UUID> --start 2026-11-01 --end 2026-11-03 --key-secret <test secret>

Flow:
    1. Login as customer
    2. Quote the stay
    3. Create booking
    4. Login as stall owner and approve (skipped with --auto-approved)
    5. Open checkout (creates the gateway order)
    6. Confirm payment with a signature computed from the test key secret
"""

import argparse
import json
import sys

import httpx

from stallbook.gateways.razorpay import compute_signature

BASE_URL = "http://localhost:8000"

# Test credentials
CUSTOMER_EMAIL = "customer@stallbook.local"
CUSTOMER_PASSWORD = "Test@1234"
OWNER_EMAIL = "owner@stallbook.local"
OWNER_PASSWORD = "Test@1234"


def login(email: str, password: str) -> str:
    """Login and return token."""
    response = httpx.post(
        f"{BASE_URL}/api/v1/auth/login",
        json={"email": email, "password": password},
        timeout=10.0,
    )
    if response.status_code != 200:
        print(f"ERROR: Login failed for {email}: {response.status_code}")
        print(response.text)
        sys.exit(1)

    return response.json()["access_token"]


def api_request(token: str, method: str, endpoint: str, data: dict | None = None) -> dict:
    """Make authenticated API request."""
    headers = {"Authorization": f"Bearer {token}"}
    response = httpx.request(
        method,
        f"{BASE_URL}{endpoint}",
        headers=headers,
        json=data if method != "GET" else None,
        timeout=30.0,
    )
    return {"status": response.status_code, "data": response.json() if response.text else {}}


def print_step(step: int, title: str):
    """Print step header."""
    print(f"\n{'='*60}")
    print(f"STEP {step}: {title}")
    print("="*60)


def print_result(result: dict) -> bool:
    """Print result and report whether the call succeeded."""
    if result["status"] >= 400:
        print(f"ERROR ({result['status']}): {json.dumps(result['data'], indent=2)}")
        return False

    print(f"Status: {result['status']}")
    print(json.dumps(result["data"], indent=2))
    return True


def main():
    parser = argparse.ArgumentParser(description="Complete booking and payment flow")
    parser.add_argument("--stall-id", required=True, help="Stall UUID")
    parser.add_argument("--start", required=True, help="Start date (YYYY-MM-DD)")
    parser.add_argument("--end", required=True, help="End date (YYYY-MM-DD)")
    parser.add_argument("--key-secret", required=True, help="Gateway test key secret")
    parser.add_argument("--payment-id", default="pay_flowscript0001", help="Simulated gateway payment id")
    parser.add_argument("--auto-approved", action="store_true", help="Skip the owner approval step")
    args = parser.parse_args()

    # Step 1: Login as customer
    print_step(1, "Login as customer")
    customer_token = login(CUSTOMER_EMAIL, CUSTOMER_PASSWORD)
    print(f"Logged in as {CUSTOMER_EMAIL}")

    # Step 2: Quote
    print_step(2, "Quote the stay")
    quote = api_request(customer_token, "POST", "/api/v1/bookings/quote", {
        "stall_id": args.stall_id,
        "start_date": args.start,
        "end_date": args.end,
    })
    if not print_result(quote):
        sys.exit(1)

    # Step 3: Create booking
    print_step(3, "Create booking")
    booking = api_request(customer_token, "POST", "/api/v1/bookings", {
        "stall_id": args.stall_id,
        "start_date": args.start,
        "end_date": args.end,
    })
    if not print_result(booking):
        sys.exit(1)
    booking_id = booking["data"]["id"]

    # Step 4: Owner approval
    if not args.auto_approved:
        print_step(4, "Approve booking as stall owner")
        owner_token = login(OWNER_EMAIL, OWNER_PASSWORD)
        approval = api_request(owner_token, "POST", f"/api/v1/owner/bookings/{booking_id}/approve")
        if not print_result(approval):
            sys.exit(1)

    # Step 5: Checkout
    print_step(5, "Open checkout")
    checkout = api_request(customer_token, "POST", f"/api/v1/payments/bookings/{booking_id}/checkout")
    if not print_result(checkout):
        sys.exit(1)
    order_id = checkout["data"]["order_id"]

    # Step 6: Confirm
    print_step(6, "Confirm payment")
    signature = compute_signature(args.key_secret, order_id, args.payment_id)
    confirmation = api_request(customer_token, "POST", f"/api/v1/payments/bookings/{booking_id}/confirm", {
        "order_id": order_id,
        "payment_id": args.payment_id,
        "signature": signature,
    })
    if not print_result(confirmation):
        sys.exit(1)

    print(f"\nBooking {booking_id} is {confirmation['data']['booking_status']}")


if __name__ == "__main__":
    main()
