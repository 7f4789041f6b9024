# app/services/validators/word_lists.py
# Curated French vocabulary, stored in normalized form (lower-case, no accents).

DEFAULT_WORD_LISTS = {
    "PAYS": {
        "france", "allemagne", "italie", "espagne", "angleterre", "portugal",
        "suisse", "belgique", "canada", "bresil", "argentine", "japon", "chine", "russie",
    },
    "VILLE": {
        "paris", "lyon", "marseille", "toulouse", "nice", "strasbourg", "bordeaux",
        "lille", "rennes", "reims", "montpellier", "dijon", "angers", "nimes",
    },
    "ANIMAL": {
        "chien", "chat", "cheval", "vache", "porc", "mouton", "lapin", "souris",
        "lion", "tigre", "elephant", "girafe", "zebre", "renard", "loup", "ours",
    },
    "METIER": {
        "medecin", "infirmier", "professeur", "ingenieur", "avocat", "comptable",
        "architecte", "plombier", "electricien", "boulanger", "coiffeur", "dentiste",
    },
    "PRENOM": {
        "pierre", "paul", "jean", "marie", "anne", "sophie", "claire", "julien",
        "nicolas", "thomas", "antoine", "matthieu", "alexandre", "francois",
    },
    "FRUIT": {
        "pomme", "poire", "banane", "orange", "citron", "fraise", "cerise", "peche",
        "abricot", "prune", "raisin", "melon", "pasteque", "ananas", "kiwi", "mangue",
    },
    "LEGUME": {
        "tomate", "carotte", "pomme de terre", "salade", "radis", "navet",
        "poireau", "haricot", "courgette", "aubergine", "epinard", "oignon",
    },
    "OBJET": {
        "table", "chaise", "lit", "armoire", "television", "telephone", "ordinateur",
        "livre", "stylo", "crayon", "voiture", "velo", "montre", "lunettes",
    },
    "CELEBRITE": {
        "napoleon", "de gaulle", "moliere", "voltaire", "hugo", "balzac", "zola",
        "monet", "renoir", "picasso", "dali", "rodin", "pasteur", "curie",
    },
}
