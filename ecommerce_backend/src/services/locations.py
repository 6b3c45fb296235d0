"""
Delivery locations and shipping cost.

Orders are shipped at one of two flat rates: inside Dhaka or outside Dhaka. The district
list drives the checkout district/area pickers; districts with no listed areas accept any
area text.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from src.core.errors import ValidationError

DISTRICT_AREA_DATA: Dict[str, List[str]] = {
    "Dhaka": [
        "Adabor", "Badda", "Banani", "Bangshal", "Cantonment", "Chawkbazar", "Dakshinkhan", "Demra",
        "Dhanmondi", "Gulshan", "Hazaribagh", "Jatrabari", "Kadamtali", "Kafrul", "Kalabagan",
        "Kamrangirchar", "Keraniganj", "Khilgaon", "Khilkhet", "Kotwali", "Lalbagh", "Mirpur",
        "Mohammadpur", "Motijheel", "Pallabi", "Paltan", "Ramna", "Rampura", "Sabujbagh", "Savar",
        "Shah Ali", "Shahbagh", "Sher-e-Bangla Nagar", "Shyampur", "Sutrapur", "Tejgaon", "Turag",
        "Uttara", "Uttarkhan", "Vatara", "Wari",
    ],
    "Gazipur": ["Gazipur Sadar", "Kaliakair", "Kaliganj", "Kapasia", "Sreepur", "Tongi"],
    "Narayanganj": ["Araihazar", "Bandar", "Narayanganj Sadar", "Rupganj", "Siddhirganj", "Sonargaon"],
    "Chattogram": [
        "Agrabad", "Anwara", "Bakalia", "Bayezid", "Chandgaon", "Double Mooring", "Halishahar",
        "Hathazari", "Khulshi", "Kotwali", "Pahartali", "Panchlaish", "Patenga", "Patiya", "Sitakunda",
    ],
    "Sylhet": ["Beanibazar", "Bishwanath", "Companiganj", "Golapganj", "Jaintiapur", "Sylhet Sadar"],
    "Rajshahi": ["Boalia", "Godagari", "Motihar", "Paba", "Puthia", "Rajpara", "Shah Makhdum"],
    "Khulna": ["Daulatpur", "Dumuria", "Khalishpur", "Khan Jahan Ali", "Khulna Sadar", "Sonadanga"],
    "Barishal": ["Babuganj", "Bakerganj", "Banaripara", "Barishal Sadar", "Gournadi", "Muladi"],
    "Rangpur": ["Badarganj", "Gangachara", "Kaunia", "Mithapukur", "Pirganj", "Rangpur Sadar"],
    "Mymensingh": ["Bhaluka", "Fulbaria", "Gaffargaon", "Muktagacha", "Mymensingh Sadar", "Trishal"],
    "Cumilla": ["Burichang", "Chandina", "Chauddagram", "Cumilla Sadar", "Daudkandi", "Laksam"],
}

# Districts for which any area is accepted.
for _district in (
    "Bagerhat", "Bandarban", "Barguna", "Bhola", "Bogura", "Brahmanbaria", "Chandpur",
    "Chapainawabganj", "Chuadanga", "Cox's Bazar", "Dinajpur", "Faridpur", "Feni", "Gaibandha",
    "Gopalganj", "Habiganj", "Jamalpur", "Jashore", "Jhalokathi", "Jhenaidah", "Joypurhat",
    "Khagrachhari", "Kishoreganj", "Kurigram", "Kushtia", "Lakshmipur", "Lalmonirhat", "Madaripur",
    "Magura", "Manikganj", "Meherpur", "Moulvibazar", "Munshiganj", "Naogaon", "Narail", "Narsingdi",
    "Natore", "Netrokona", "Nilphamari", "Noakhali", "Pabna", "Panchagarh", "Patuakhali", "Pirojpur",
    "Rajbari", "Rangamati", "Satkhira", "Shariatpur", "Sherpur", "Sirajganj", "Sunamganj", "Tangail",
    "Thakurgaon",
):
    DISTRICT_AREA_DATA.setdefault(_district, [])

INSIDE_DHAKA = "dhaka"


def districts() -> List[str]:
    return sorted(DISTRICT_AREA_DATA, key=str.lower)


def areas_for(district: Optional[str]) -> List[str]:
    canonical = canonical_district(district)
    return list(DISTRICT_AREA_DATA.get(canonical, [])) if canonical else []


def canonical_district(district: Optional[str]) -> Optional[str]:
    wanted = (district or "").strip().lower()
    for name in DISTRICT_AREA_DATA:
        if name.lower() == wanted:
            return name
    return None


def validate_location(district: Optional[str], area: Optional[str]) -> None:
    """Reject unknown districts, and areas that are not listed for a district that has a list."""
    canonical = canonical_district(district)
    if canonical is None:
        raise ValidationError(f"Unknown district: {district!r}.")
    known_areas = DISTRICT_AREA_DATA[canonical]
    if area and known_areas and area.strip().lower() not in {a.lower() for a in known_areas}:
        raise ValidationError(f"{area!r} is not a delivery area of {canonical}.")


# PUBLIC_INTERFACE
def shipping_cost(district: Optional[str], inside_dhaka_cents: int, outside_dhaka_cents: int) -> int:
    """No district yet means no shipping charge; Dhaka ships at the inside rate."""
    if not district or not district.strip():
        return 0
    return inside_dhaka_cents if district.strip().lower() == INSIDE_DHAKA else outside_dhaka_cents
