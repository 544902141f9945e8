import base64

HOTEL_ID = 1
OTHER_HOTEL_ID = 2

PNG = b"\x89PNG\r\n\x1a\n"
SIGNATURE = "data:image/png;base64," + base64.b64encode(PNG).decode()


def bearer(hotel_id=HOTEL_ID):
    return {"Authorization": f"Bearer {hotel_id}"}
