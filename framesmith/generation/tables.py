from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class TableSet:
    names: Tuple[str, ...]
    occupations: Tuple[str, ...]
    locations: Tuple[str, ...]
    location_prefixes: Tuple[str, ...]
    location_suffixes: Dict[str, Tuple[str, ...]]
    regions: Tuple[str, ...]
    npc_descriptions: Tuple[str, ...]
    encounter_environments: Tuple[str, ...]
    encounter_enemy_types: Tuple[str, ...]
    encounter_tactics: Tuple[str, ...]
    encounter_rewards: Tuple[str, ...]
    tone_and_feel: Tuple[str, ...]
    themes: Tuple[str, ...]


FANTASY = TableSet(
    names=(
        "Grimwald", "Elara", "Thorne", "Mira", "Kael", "Lyra", "Dorian", "Zara",
        "Fenris", "Isolde", "Rowan", "Vex", "Cassian", "Nyx", "Aldric", "Sable",
        "Bram", "Seraphina", "Garrick", "Celeste", "Magnus", "Aria", "Tobias", "Raven",
        "Silas", "Luna", "Cedric", "Vesper", "Owen", "Iris", "Jasper", "Nova",
        "Finn", "Aurora", "Declan", "Sage", "Rhys", "Ember", "Asher", "Willow",
        "Kieran", "Hazel", "Cyrus", "Briar", "Orion", "Violet", "Caspian", "Ivy",
        "Lucian", "Jade", "Stellan", "Ruby", "Atticus", "Pearl", "Ezra", "Coral",
        "Dashiell", "Marigold", "Callum", "Fern", "Theodore", "Maximus", "Dahlia",
    ),
    occupations=(
        "Blacksmith", "Tavern Owner", "Guard Captain", "Merchant", "Herbalist",
        "Town Crier", "Stable Master", "Librarian", "Baker", "Fishmonger",
        "Alchemist", "Cartographer", "Scribe", "Innkeeper", "Fletcher",
        "Tanner", "Cobbler", "Weaver", "Carpenter", "Mason",
        "Jeweler", "Apothecary", "Bard", "Healer", "Hunter",
        "Fisher", "Farmer", "Miller", "Butcher", "Brewer",
        "Seamstress", "Leatherworker", "Potter", "Glassblower", "Chandler",
        "Bookseller", "Locksmith", "Shipwright", "Sailmaker", "Navigator",
        "Scout", "Tracker", "Trapper", "Prospector", "Miner",
        "Forester", "Gamekeeper", "Falconer", "Stablehand", "Groom",
    ),
    locations=(
        "The Golden Lion Inn", "Riverside Market", "The Old Mill", "Whispering Woods",
        "Ironforge District", "The Broken Compass Tavern", "Mistwood Grove",
        "Crimson Square", "The Silver Anchor", "Moonstone Bridge", "Dragon's Rest",
        "The Laughing Bard", "Thornhaven Keep", "Crystal Springs", "The Rusty Nail",
        "Shadowfen Marsh", "The Gilded Page", "Starfall Tower", "The Crooked Spire",
        "Emberwood Forest", "The Drunken Dwarf", "Sapphire Bay", "The Wandering Minstrel",
        "Frostpeak Mountains", "The Jolly Roger", "Sunset Harbor", "The White Stag",
        "Ravenwood Cemetery", "The Blue Anchor", "Goldleaf Gardens", "The Black Cat",
    ),
    location_prefixes=(
        "Ancient", "Forgotten", "Mystic", "Dark", "Silver", "Golden", "Shadow",
        "Crystal", "Iron", "Ember", "Frost", "Storm", "Verdant", "Hollow",
        "Broken", "Lost", "Hidden", "Sacred", "Cursed", "Blessed", "Wild",
        "Crimson", "Azure", "Obsidian", "Marble", "Copper", "Bronze", "Jade",
    ),
    location_suffixes={
        "city": ("Haven", "Bastion", "Citadel", "Keep", "Hold", "Crown", "Gate", "Point"),
        "town": ("Dale", "Crossing", "Rest", "Falls", "Bridge", "Harbor", "Port", "Ford"),
        "village": ("Hollow", "Glen", "Vale", "Brook", "Meadow", "Thicket", "Heath", "Moor"),
        "dungeon": ("Catacombs", "Depths", "Vault", "Labyrinth", "Ruins", "Crypts", "Tombs", "Pit"),
        "wilderness": ("Woods", "Forest", "Peaks", "Wastes", "Moors", "Wilds", "Expanse", "Reach"),
        "landmark": ("Spire", "Monolith", "Shrine", "Monument", "Tower", "Arch", "Obelisk", "Pillar"),
        "other": ("Place", "Site", "Location", "Quarter", "District", "Ward", "Sector", "Zone"),
    },
    regions=(
        "The Northlands", "Southern Territories", "Eastern Marches", "Western Frontier",
        "The Heartlands", "Coastal Regions", "Mountain Territories", "The Borderlands",
        "The Wilderness", "The Lowlands", "The Highlands", "The Midlands",
        "The Outlands", "The Wastes", "The Wetlands", "The Drylands",
    ),
    npc_descriptions=(
        "A weathered figure with keen eyes and calloused hands, speaking with quiet authority.",
        "Youthful and energetic, always ready with a smile and a kind word for everyone.",
        "Gruff and no-nonsense, but fair in dealings and fiercely loyal to friends.",
        "Mysterious and soft-spoken, with an air of secrets and hidden knowledge.",
        "Boisterous and friendly, known throughout the region for hearty laughter.",
        "Sharp-eyed and calculating, missing nothing that happens in their domain.",
        "Gentle and compassionate, with a healing touch and comforting presence.",
        "Scarred and battle-hardened, but with surprising warmth in rare unguarded moments.",
        "Eccentric and brilliant, often lost in thought or muttering to themselves.",
        "Charming and silver-tongued, able to talk their way into or out of anything.",
    ),
    encounter_environments=(
        "Dense forest with thick undergrowth", "Rocky mountain pass", "Abandoned ruins",
        "Misty swampland", "Dark cavern system", "Crumbling tower", "Foggy moorland",
        "Desert canyon", "Frozen tundra", "Overgrown temple", "Underground chamber",
        "Coastal cliffs", "Burning battlefield", "Corrupted grove", "Ancient crypt",
    ),
    encounter_enemy_types=(
        "Bandits and outlaws", "Wild beasts", "Undead creatures", "Corrupted wildlife",
        "Cult members", "Mercenaries", "Golems and constructs", "Fey creatures",
        "Demons or fiends", "Elemental beings", "Giant insects", "Rival adventurers",
        "Possessed townsfolk", "Tribal warriors", "Magical constructs",
    ),
    encounter_tactics=(
        "Ambush from hiding, then retreat to ranged positions",
        "Swarm the weakest-looking target to eliminate quickly",
        "Protect their leader at all costs",
        "Fight defensively, looking for opportunity to flee",
        "Reckless all-out assault with no regard for safety",
        "Coordinated flanking maneuvers",
        "Use terrain to their advantage, forcing party into disadvantageous positions",
        "Cast spells or use abilities from range while melee fighters engage",
        "Focus fire on spellcasters first",
        "Hit and run tactics, never staying in one place",
    ),
    encounter_rewards=(
        "Minor healing potions and supplies", "A small cache of coins",
        "A useful magical trinket", "Information about a larger threat",
        "A map to a hidden location", "Crafting materials",
        "A letter revealing plot details", "Personal effects that tell a story",
        "A strange key", "Alchemical components", "A deed or contract",
        "Treasure map fragment",
    ),
    tone_and_feel=(
        "Adventurous", "Dark", "Whimsical", "Gritty", "Epic", "Mysterious",
        "Lighthearted", "Tense", "Heroic", "Tragic", "Comedic", "Horror",
        "Political", "Romantic", "Melancholic", "Hopeful", "Noir", "Surreal",
    ),
    themes=(
        "Duty vs. Ethics", "Transformation", "Survival", "Cultural Clash",
        "Power and Corruption", "Redemption", "Sacrifice", "Identity",
        "Family", "Loyalty", "Freedom", "Justice", "Revenge", "Hope",
        "Loss and Grief", "Coming of Age", "Nature vs. Civilization",
        "Knowledge vs. Ignorance", "Tradition vs. Progress", "Individual vs. Society",
    ),
)

SCI_FI = TableSet(
    names=(
        "Kara Stele", "Jax Pavan", "Corran Horn", "Tycho Celchu", "Dash Rendar",
        "Kyle Katarn", "Jan Ors", "Tenel Ka", "Zekk", "Tahiri Veila",
        "Kiro Vanto", "Eli Vanto", "Arihnda Pryce", "Rae Sloane", "Bodhi Rook",
        "Hera Syndulla", "Kanan Jarrus", "Sabine Wren", "Zeb Orrelios", "Cham Syndulla",
        "Numa", "Iden Versio", "Del Meeko", "Gideon Hask", "Amilyn Holdo",
        "Snap Wexley", "Jess Pava", "Nien Nunb", "Crix Madine", "Jan Dodonna",
        "Garm Bel Iblis", "Borsk Fey'lya",
    ),
    occupations=(
        "Smuggler", "Bounty Hunter", "Pilot", "Mechanic", "Engineer",
        "Medic", "Diplomat", "Spy", "Information Broker", "Merchant",
        "Cantina Owner", "Docking Bay Supervisor", "Port Authority Officer", "Customs Agent",
        "Black Market Dealer", "Arms Dealer", "Ship Dealer", "Salvager", "Scavenger",
        "Imperial Officer", "Rebel Operative", "Resistance Fighter",
        "Scout", "Explorer", "Archaeologist", "Historian", "Xenobiologist",
        "Astromech Technician", "Protocol Droid Programmer", "Crime Lord Lieutenant",
        "Hutt Cartel Representative", "Corporate Sector Executive", "Mining Guild Supervisor",
        "Trade Federation Delegate", "Banking Clan Representative", "Techno Union Engineer",
        "Former Jedi", "Force Sensitive", "Dark Side Adept", "Imperial Inquisitor",
        "Mandalorian Warrior", "Clone Trooper", "Stormtrooper Deserter", "Imperial Defector",
        "Rebel Cell Leader", "Resistance Commander", "New Republic Senator", "Imperial Moff",
    ),
    locations=(
        "The Mos Eisley Cantina", "Docking Bay 94", "Jabba's Palace", "Cloud City",
        "Echo Base", "Massassi Temple", "The Jedi Temple", "Coruscant Underworld",
        "Senate Building", "Imperial Academy", "Rebel Outpost Delta",
        "Hutt Space Trading Post", "Corporate Sector Station", "Smuggler's Den",
        "Wild Space Frontier", "Unknown Regions Outpost", "Hyperspace Waystation",
        "Asteroid Mining Colony", "Tibanna Gas Platform", "Spice Mines of Kessel",
        "Ryloth Resistance Base", "Mandalore Stronghold", "Kamino Cloning Facility",
        "Geonosis Battle Arena", "Mustafar Mining Complex", "Dagobah Swamp",
        "Endor Forest Moon", "Tatooine Jundland Wastes",
    ),
    location_prefixes=(
        "New", "Old", "Imperial", "Rebel", "Hidden", "Lost", "Abandoned",
        "Secret", "Remote", "Outer Rim", "Core World", "Mid Rim", "Wild Space",
        "Contested", "Occupied", "Liberated", "Blockaded", "Restricted", "Free",
        "Trading", "Mining", "Research", "Military", "Civilian", "Corporate",
    ),
    location_suffixes={
        "city": ("City", "Spaceport", "Starport", "Hub", "Station", "Platform", "Colony", "Settlement"),
        "town": ("Outpost", "Trading Post", "Waystation", "Depot", "Terminal", "Port", "Haven", "Refuge"),
        "village": ("Settlement", "Encampment", "Homestead", "Colony", "Compound", "Outpost", "Station", "Base"),
        "dungeon": ("Ruins", "Wreckage", "Derelict", "Tomb", "Catacombs", "Prison", "Detention Block", "Facility"),
        "wilderness": ("Sector", "Expanse", "Nebula", "Asteroid Field", "Badlands", "Wastes", "Wilds", "Frontier"),
        "landmark": ("Monument", "Temple", "Citadel", "Observatory", "Beacon", "Array", "Installation", "Complex"),
        "other": ("Sector", "Zone", "District", "Quarter", "Level", "Platform", "Dock", "Bay"),
    },
    regions=(
        "Core Worlds", "Inner Rim", "Mid Rim", "Outer Rim Territories",
        "Wild Space", "Unknown Regions", "Expansion Region", "Colonies",
        "Hutt Space", "Corporate Sector", "Tion Cluster", "Hapes Consortium",
        "Mandalorian Space", "Chiss Ascendancy", "Sith Worlds", "Jedi Territories",
    ),
    npc_descriptions=(
        "A battle-scarred veteran with cybernetic implants and a haunted look in their eyes.",
        "Young and idealistic, eager to prove themselves in the galactic conflict.",
        "Gruff and pragmatic, having survived by their wits in the lawless Outer Rim.",
        "Mysterious and Force-sensitive, with knowledge of ancient Jedi secrets.",
        "Charismatic and smooth-talking, able to negotiate deals across the galaxy.",
        "Sharp-eyed and paranoid, constantly scanning for Imperial surveillance.",
        "Gentle and compassionate, dedicated to healing in a war-torn galaxy.",
        "Calculating and ruthless, with connections to the underworld syndicates.",
        "Brilliant engineer, always tinkering with droids and starship systems.",
        "Former Imperial officer, now disillusioned and seeking redemption.",
    ),
    encounter_environments=(
        "Asteroid field debris", "Derelict Star Destroyer", "Abandoned mining colony",
        "Dense jungle on a jungle moon", "Lava flows on a volcanic world", "Ice caverns on Hoth",
        "Crashed starship wreckage", "Imperial research facility", "Rebel hidden base",
        "Spice smuggling den", "Hutt crime lord's lair", "Corporate sector station",
        "Ancient Sith temple", "Jedi ruins", "Clone Wars battlefield", "Death Star corridor",
    ),
    encounter_enemy_types=(
        "Stormtroopers", "Imperial Scout Troopers", "TIE Fighter pilots",
        "Bounty hunters", "Hutt cartel enforcers", "Pirate crew", "Smugglers",
        "Corporate security forces", "Mercenary squad", "Assassin droids",
        "Dark side Force users", "Imperial Inquisitors", "Sith cultists",
        "Wild creatures (Rancor, Nexu, Wampa)", "Battle droids", "Clone troopers",
    ),
    encounter_tactics=(
        "Coordinate blaster fire from cover positions",
        "Deploy probe droids to scout, then ambush",
        "Call for TIE fighter air support",
        "Use thermal detonators to flush out enemies",
        "Establish defensive perimeter and hold position",
        "Flank using jetpacks or repulsorlifts",
        "Disable ship systems, then board for capture",
        "Ion weapons to disable droids and vehicles",
        "Stun weapons to capture targets alive for interrogation",
        "Retreat to Star Destroyer for orbital bombardment",
    ),
    encounter_rewards=(
        "Imperial credits and seized equipment",
        "Valuable starship components or astromech droid",
        "Encrypted Imperial data chip with intelligence",
        "Black market contacts and safe house coordinates",
        "Rare kyber crystal or Force artifact",
        "Modified blaster pistol or custom armor",
        "Hyperspace navigation charts to hidden routes",
        "Bounty puck with lucrative target information",
        "Republic credits and Alliance commendation",
        "Deactivated assassin droid for reprogramming",
    ),
    tone_and_feel=(
        "Space Opera", "Heroic", "Gritty", "Noir", "Swashbuckling",
        "Political Intrigue", "Military", "Underworld", "Mystical",
        "Action-Packed", "Desperate", "Hope", "Rebellion", "Empire",
        "Smuggler's Life", "Jedi Adventure", "Dark Side", "Bounty Hunting",
    ),
    themes=(
        "Hope vs. Despair", "Rebellion vs. Empire", "Light vs. Dark",
        "Freedom vs. Tyranny", "Duty vs. Personal Gain", "Redemption",
        "Legacy and Destiny", "Power and Corruption", "Loyalty and Betrayal",
        "Survival in the Outer Rim", "The Force and Balance", "War's Cost",
    ),
)

SCI_FI_SYSTEMS = frozenset({"starwarsd6"})

ENCOUNTER_KINDS = ("Ambush", "Skirmish", "Battle", "Confrontation")

PITCHES = (
    "A tale of heroes rising to face an ancient threat.",
    "Unlikely allies must band together to prevent catastrophe.",
    "Dark forces gather as the world teeters on the brink.",
    "A journey of discovery that will change everything.",
    "When the old ways fail, new heroes must forge a new path.",
)

PLAYER_PRINCIPLES = (
    "Make it personal",
    "Embrace vulnerability",
    "Work together",
    "Take bold action",
    "Follow your character's truth",
    "Create connections",
    "Challenge assumptions",
    "Respect the world",
)

GM_PRINCIPLES = (
    "Make the world feel alive",
    "Give them hard choices",
    "Show consequences",
    "Create compelling NPCs",
    "Balance danger and hope",
    "Reward creativity",
    "Build on their ideas",
    "Keep the momentum",
)

SESSION_ZERO_QUESTIONS = (
    "What brought your character to this adventure?",
    "What is your character's greatest fear?",
    "Who do you care most about?",
    "What do you want to accomplish?",
    "What secret do you keep?",
    "How do you know the other party members?",
    "What line won't you cross?",
    "What is your character's dream?",
    "What haunts you from your past?",
    "What makes you different from others?",
)

INCITING_INCIDENTS = (
    "A mysterious stranger arrives with an urgent plea for help.",
    "Someone you care about goes missing under strange circumstances.",
    "An ancient evil stirs after centuries of slumber.",
    "A powerful artifact is stolen, threatening the balance of power.",
    "War breaks out, forcing you to choose sides.",
    "A natural disaster reveals long-buried secrets.",
    "You witness a crime that puts you in danger.",
    "A prophecy names you as key to preventing catastrophe.",
)


def tables_for(game_system: str) -> TableSet:
    if game_system in SCI_FI_SYSTEMS:
        return SCI_FI
    return FANTASY
