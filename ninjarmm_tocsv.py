#!/usr/bin/env python3
"""
ninjarmm_tocsv.py
Summarise NinjaRMM devices by type for every customer (organization) as CSV.

Usage:
  NINJA_ACCESS_KEY_ID=... NINJA_SECRET_ACCESS_KEY=... python3 ninjarmm_tocsv.py > output.csv

Notes:
- Requires: requests (pip install requests)
- Failed API calls are reported as "Error: ..." lines and the run carries on;
  the report is written once, at the end, with whatever was collected.
"""

import sys

import requests

from ninja_api import NinjaApiError, NinjaClient, NinjaConfig

CSV_HEADER = 'Customer, DeviceType, Qty\n'

# MAC devices are reported as Windows workstations at the customer's request.
# Drop the entry to keep them separate.
NODE_CLASS_REWRITES = {'MAC': 'WINDOWS_WORKSTATION'}


def count_device_types(devices):
    counters = {}
    for device in devices:
        node_class = NODE_CLASS_REWRITES.get(device.node_class, device.node_class)
        counters[node_class] = counters.get(node_class, 0) + 1
    return counters


def format_report(rows):
    """
    Render (customer, device type, qty) tuples below the CSV header.
    """
    # no quoting: a comma in a customer name shifts the columns
    out = CSV_HEADER
    for customer_name, node_class, count in rows:
        out += f"{customer_name}, {node_class}, {count}\n"
    return out


def build_report(client):
    rows = []

    try:
        customers = client.get_organizations()
    except NinjaApiError as e:
        print(f"Error: {e}")
        customers = []

    for customer in customers:
        try:
            devices = client.get_devices(customer.id)
        except NinjaApiError as e:
            # Keep going; the customer just gets no rows
            print(f"Error: customer {customer.id} ({customer.name}): {e}")
            devices = []
        for node_class, count in count_device_types(devices).items():
            rows.append((customer.name, node_class, count))

    return format_report(rows)


# ----- Main flow -----
def main():
    with requests.Session() as session:
        client = NinjaClient(NinjaConfig.from_env(), session=session)
        report = build_report(client)
    sys.stdout.write(report)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
