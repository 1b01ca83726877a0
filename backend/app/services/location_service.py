"""
Static province/district/city hierarchy of Sri Lanka.

Province ids are 1-9; district ids are the province id followed by a
running number (e.g. 21 = Kandy in Central Province).
"""
from typing import Dict, List, Optional

SRI_LANKA_DATA: List[Dict] = [
    {
        "id": 1,
        "name": "Western Province",
        "districts": [
            {
                "id": 11,
                "name": "Colombo District",
                "cities": [
                    "Colombo", "Dehiwala-Mount Lavinia", "Moratuwa", "Sri Jayawardenepura Kotte",
                    "Battaramulla", "Maharagama", "Kotte", "Nugegoda", "Homagama", "Kaduwela",
                ],
            },
            {
                "id": 12,
                "name": "Gampaha District",
                "cities": [
                    "Gampaha", "Negombo", "Katunayake", "Kelaniya", "Wattala",
                    "Minuwangoda", "Ja-Ela", "Kandana", "Divulapitiya", "Nittambuwa",
                ],
            },
            {
                "id": 13,
                "name": "Kalutara District",
                "cities": [
                    "Kalutara", "Panadura", "Horana", "Beruwala", "Aluthgama",
                    "Matugama", "Wadduwa", "Bandaragama", "Ingiriya", "Bulathsinhala",
                ],
            },
        ],
    },
    {
        "id": 2,
        "name": "Central Province",
        "districts": [
            {"id": 21, "name": "Kandy District", "cities": ["Kandy", "Peradeniya", "Gampola", "Katugastota", "Kundasale"]},
            {"id": 22, "name": "Matale District", "cities": ["Matale", "Dambulla", "Rattota", "Galewela", "Sigiriya"]},
            {"id": 23, "name": "Nuwara Eliya District", "cities": ["Nuwara Eliya", "Hatton", "Talawakele", "Nanu Oya"]},
        ],
    },
    {
        "id": 3,
        "name": "Southern Province",
        "districts": [
            {"id": 31, "name": "Galle District", "cities": ["Galle", "Hikkaduwa", "Unawatuna", "Ambalangoda", "Bentota"]},
            {"id": 32, "name": "Matara District", "cities": ["Matara", "Mirissa", "Weligama", "Dikwella", "Akuressa"]},
            {"id": 33, "name": "Hambantota District", "cities": ["Hambantota", "Tangalle", "Tissamaharama", "Kataragama", "Ambalantota"]},
        ],
    },
    {
        "id": 4,
        "name": "Northern Province",
        "districts": [
            {"id": 41, "name": "Jaffna District", "cities": ["Jaffna", "Point Pedro", "Chavakachcheri", "Nallur", "Kankesanthurai"]},
            {"id": 42, "name": "Kilinochchi District", "cities": ["Kilinochchi", "Pallai", "Poonakary"]},
            {"id": 43, "name": "Mannar District", "cities": ["Mannar", "Talaimannar", "Madhu"]},
            {"id": 44, "name": "Vavuniya District", "cities": ["Vavuniya", "Cheddikulam", "Nedunkeni"]},
            {"id": 45, "name": "Mullaitivu District", "cities": ["Mullaitivu", "Puthukudiyiruppu", "Oddusuddan"]},
        ],
    },
    {
        "id": 5,
        "name": "Eastern Province",
        "districts": [
            {"id": 51, "name": "Trincomalee District", "cities": ["Trincomalee", "Nilaveli", "Kinniya", "Kantale"]},
            {"id": 52, "name": "Batticaloa District", "cities": ["Batticaloa", "Kattankudy", "Pasikudah", "Eravur"]},
            {"id": 53, "name": "Ampara District", "cities": ["Ampara", "Arugam Bay", "Kalmunai", "Pottuvil"]},
        ],
    },
    {
        "id": 6,
        "name": "North Western Province",
        "districts": [
            {"id": 61, "name": "Kurunegala District", "cities": ["Kurunegala", "Kuliyapitiya", "Narammala", "Pannala"]},
            {"id": 62, "name": "Puttalam District", "cities": ["Puttalam", "Chilaw", "Kalpitiya", "Wennappuwa"]},
        ],
    },
    {
        "id": 7,
        "name": "North Central Province",
        "districts": [
            {"id": 71, "name": "Anuradhapura District", "cities": ["Anuradhapura", "Mihintale", "Kekirawa", "Medawachchiya"]},
            {"id": 72, "name": "Polonnaruwa District", "cities": ["Polonnaruwa", "Hingurakgoda", "Medirigiriya", "Minneriya"]},
        ],
    },
    {
        "id": 8,
        "name": "Uva Province",
        "districts": [
            {"id": 81, "name": "Badulla District", "cities": ["Badulla", "Bandarawela", "Ella", "Haputale", "Welimada"]},
            {"id": 82, "name": "Monaragala District", "cities": ["Monaragala", "Wellawaya", "Buttala", "Bibile"]},
        ],
    },
    {
        "id": 9,
        "name": "Sabaragamuwa Province",
        "districts": [
            {"id": 91, "name": "Ratnapura District", "cities": ["Ratnapura", "Balangoda", "Embilipitiya", "Pelmadulla"]},
            {"id": 92, "name": "Kegalle District", "cities": ["Kegalle", "Mawanella", "Pinnawala", "Kitulgala"]},
        ],
    },
]


def list_provinces() -> List[Dict]:
    return SRI_LANKA_DATA


def get_province(province_id: str) -> Optional[Dict]:
    """Find a province by id; ids compare as strings."""
    for province in SRI_LANKA_DATA:
        if str(province["id"]) == str(province_id):
            return province
    return None


def get_district(district_id: str) -> Optional[Dict]:
    """Find a district by id, returning it together with its province."""
    for province in SRI_LANKA_DATA:
        for district in province["districts"]:
            if str(district["id"]) == str(district_id):
                return {**district, "province": province}
    return None
