import json
import os
import urllib.request
import urllib.error

# The service must run with BAPI_DATA_DIR pointing at scripts/fixtures.
BASE_URL = os.getenv("BAPI_API_URL", "http://localhost:8000")
FIXTURE_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "fixtures")

FIXTURES = [
    {
        "name": "any value - all characteristics with distinct values",
        "expect_status": 200,
        "payload": {"filePath": os.path.join(FIXTURE_DIR, "material_bapi.json"), "searchProperty": "CHARACT"},
    },
    {
        "name": "value filter - one characteristic",
        "expect_status": 200,
        "payload": {"filePath": os.path.join(FIXTURE_DIR, "material_bapi.json"), "searchProperty": "CHARACT", "searchValue": "COLOR"},
    },
    {
        "name": "property absent - empty report",
        "expect_status": 200,
        "payload": {"filePath": os.path.join(FIXTURE_DIR, "material_bapi.json"), "searchProperty": "NOT_THERE"},
    },
    {
        "name": "missing file",
        "expect_status": 404,
        "payload": {"filePath": os.path.join(FIXTURE_DIR, "does_not_exist.json"), "searchProperty": "CHARACT"},
    },
    {
        "name": "directory instead of file",
        "expect_status": 400,
        "payload": {"filePath": FIXTURE_DIR, "searchProperty": "CHARACT"},
    },
]

def post_json(path: str, payload: dict):
    url = BASE_URL + path
    data = json.dumps(payload).encode("utf-8")
    req = urllib.request.Request(url, data=data, headers={"Content-Type": "application/json"})
    try:
        with urllib.request.urlopen(req, timeout=10) as resp:
            return resp.status, json.loads(resp.read().decode("utf-8"))
    except urllib.error.HTTPError as e:
        body = e.read().decode("utf-8")
        try:
            return e.code, json.loads(body)
        except ValueError:
            return e.code, {"raw": body}
    except urllib.error.URLError as e:
        return 0, {"error": str(e)}

def main():
    print("BAPI analyzer demo fixtures")
    print("=" * 27)

    ok = 0
    for fx in FIXTURES:
        status, body = post_json("/tools/search_bapi_file", fx["payload"])
        passed = (status == fx["expect_status"])

        print(f"\n{fx['name']}")
        print(f"  expected HTTP {fx['expect_status']}, got {status} -> {'OK' if passed else 'MISMATCH'}")
        meta = body.get("meta") if isinstance(body, dict) else None
        if meta:
            print(f"  matches: {meta.get('matches')}  patterns: {meta.get('patterns')}")
        elif isinstance(body, dict) and body.get("detail"):
            print(f"  detail: {body['detail']}")

        if passed:
            ok += 1

    print("\n" + "=" * 27)
    print(f"Summary: {ok}/{len(FIXTURES)} fixtures matched expected outcomes")

if __name__ == "__main__":
    main()
