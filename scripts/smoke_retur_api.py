"""
Walk a running Retur Service through the full lifecycle.

    python manage.py runserver
    python scripts/smoke_retur_api.py [BASE_URL]
"""

import sys

import requests

DEFAULT_BASE = 'http://127.0.0.1:8000/retur'


def main(base=DEFAULT_BASE):
    # Step 1: Create return
    r = requests.post(base, json={
        "item": "Shoes",
        "reason": "Wrong size",
    })
    r.raise_for_status()
    data = r.json()
    retur_id = data['id']
    print(f"STEP 1 - Created: {retur_id} | Status: {data['status']}")

    # Step 2: Approve with cash refund
    r = requests.post(f'{base}/{retur_id}/approve', json={"refund_mode": "uang"})
    r.raise_for_status()
    data = r.json()
    print(f"STEP 2 - Approved: {data['status']} | Refund: {data['refund_mode']}")

    # Step 3: Delete
    r = requests.delete(f'{base}/{retur_id}/delete')
    r.raise_for_status()
    print(f"STEP 3 - {r.json()['message']}")

    # Step 4: Detail should now be gone
    r = requests.get(f'{base}/{retur_id}')
    print(f"STEP 4 - Lookup after delete: HTTP {r.status_code}")

    # Step 5: Undo
    r = requests.post(f'{base}/undo')
    r.raise_for_status()
    data = r.json()
    print(f"STEP 5 - Restored: {data['id']} (was {retur_id}) | Status: {data['status']} | Refund: {data['refund_mode']}")

    # Step 6: Nothing left to undo
    r = requests.post(f'{base}/undo')
    print(f"STEP 6 - Second undo: HTTP {r.status_code} {r.json()}")


if __name__ == '__main__':
    main(*sys.argv[1:2])
